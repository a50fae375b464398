"""Allow ``python -m repo_spotlight``."""

from repo_spotlight.cli import main


if __name__ == "__main__":
    main()
