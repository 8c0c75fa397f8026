"""Entry point for 'python -m humans' command."""

from humans.cli import main

if __name__ == "__main__":
    main()
