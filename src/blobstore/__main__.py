"""Allow ``python -m blobstore``."""

from .cli import main

if __name__ == "__main__":
    main()
