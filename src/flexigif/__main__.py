"""Allow ``python -m flexigif``."""

from flexigif.cli import main

if __name__ == "__main__":
    main()
