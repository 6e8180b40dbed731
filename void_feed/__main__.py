"""Main entry point for the void_feed package."""

from void_feed.cli.cli import main

if __name__ == "__main__":
    main()
