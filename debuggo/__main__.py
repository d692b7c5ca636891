import sys

from debuggo.cli import main

if __name__ == "__main__":
    sys.exit(main())
