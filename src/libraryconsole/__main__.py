"""Main entry point for the libraryconsole package."""

from libraryconsole.cli import app


def main():
    """Run the console."""
    app()


if __name__ == "__main__":
    main()
