"""
Back-office command line entry point.

Usage:
    python main.py health
    python main.py list plans
    python main.py stats
"""

from kingplay.cli import main

if __name__ == "__main__":
    main()
