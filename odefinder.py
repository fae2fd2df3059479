#!/usr/bin/env python3
"""
odefinder: symbolic regression of ODE right-hand sides

Main entry point for the odefinder application.
This file serves as a thin wrapper that delegates all functionality
to the odefinder_pkg package.

Usage:
    python odefinder.py                                # Fit the -cos(t) demo
    python odefinder.py --csv data.csv --seed 1        # Fit a CSV trajectory
    python odefinder.py --help                         # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for odefinder.

    Delegates all functionality to the odefinder_pkg.cli module,
    which handles argument parsing, the search and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from odefinder_pkg.cli import main_entry

    try:
        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
