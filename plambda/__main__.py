import sys

from plambda.main import main

if __name__ == "__main__":
    sys.exit(main())
