#!/usr/bin/env python3
"""
tabrecon - Main Entry Point
Reconcile two tabular datasets by key.
"""

import sys

from tabrecon.cli import main


if __name__ == "__main__":
    sys.exit(main())
