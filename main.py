#!/usr/bin/env python3
"""SetTimer: entry point.

Run with:
    python main.py
    python -m settimer
"""

from settimer.__main__ import main


if __name__ == "__main__":
    main()
