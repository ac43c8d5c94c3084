"""Allow ``python -m rootarchive``."""

from rootarchive.cli.main import main

if __name__ == "__main__":
    main()
