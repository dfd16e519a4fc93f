"""
Module execution entry point.

Allows running with: python -m merklist_cli
"""

import sys
from merklist_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
