"""Package entry point for ``python -m bfi``."""

from bfi.cli import main

if __name__ == "__main__":
    main()
