"""Entry point for the Studio CLI.

Usage:
    python -m studio.interfaces.cli.main

Or via installed entry point:
    studio <command>
"""

from studio.interfaces.cli import app


def main() -> None:
    """Run the Studio CLI application."""
    app()


if __name__ == "__main__":
    main()
