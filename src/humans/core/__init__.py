"""Core configuration and logging for humans.inc."""
