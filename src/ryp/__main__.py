"""Allow running as ``python -m ryp``."""

from ryp.cli import main

if __name__ == "__main__":
    main()
