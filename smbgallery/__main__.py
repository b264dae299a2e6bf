"""
Main entry point for running the package as a module.

Usage:
    python -m smbgallery scan --show-files
    python -m smbgallery warm
    python -m smbgallery serve
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
