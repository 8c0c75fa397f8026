"""Infrastructure layer: persistence, auth, storage and the HTTP API."""
