#!/usr/bin/env python3
"""QuestTimer — entry point.

Run with:
    python main.py
    python -m questtimer
"""

from questtimer.__main__ import main


if __name__ == "__main__":
    main()
