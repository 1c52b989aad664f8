"""
Module execution entry point.

Allows running with: python -m fbht_cli
"""

import sys
from fbht_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
