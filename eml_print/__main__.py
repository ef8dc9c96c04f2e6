"""
Entry point for running eml-print as a module.

Usage:
    python -m eml_print message.eml
    python -m eml_print ./emails ./pdfs
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
