"""Entry point for running extract-helps as a module."""

from extract_helps.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
