import sys

from level_baker.cli import main

if __name__ == "__main__":
    sys.exit(main())
