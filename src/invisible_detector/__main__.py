"""python -m invisible_detector"""

import sys

from invisible_detector.cli import main

if __name__ == "__main__":
    sys.exit(main())
