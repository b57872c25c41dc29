"""Allow ``python -m e2erun``."""

from e2erun.cli import main

if __name__ == "__main__":
    main()
