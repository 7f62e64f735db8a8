"""
Module execution entry point.

Allows running with: python -m splitaudit_cli
"""

import sys
from splitaudit_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
