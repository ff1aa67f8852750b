"""Allow ``python -m gzmethod``."""

from .cli import main

if __name__ == "__main__":
    main()
