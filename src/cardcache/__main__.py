"""Entry point for running cardcache as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the cardcache CLI application."""
    app()


if __name__ == "__main__":
    main()
