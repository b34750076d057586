import sys

from digu.cli import main

if __name__ == "__main__":
    sys.exit(main())
