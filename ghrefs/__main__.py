"""Entry point for ``python -m ghrefs``."""

from .cli import main

if __name__ == "__main__":
    main()
