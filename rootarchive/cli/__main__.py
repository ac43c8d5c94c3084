#!/usr/bin/env python3
"""Entry point for the rootarchive CLI when run as python -m rootarchive.cli."""

if __name__ == "__main__":
    from rootarchive.cli.main import main

    main()
