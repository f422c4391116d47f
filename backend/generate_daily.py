"""
Runs the daily puzzle job. Intended for the scheduler:

    python backend/generate_daily.py [--date YYYY-MM-DD] [--daily-dir daily]

Exit status is non-zero only when no puzzle could be produced or reused.
"""
import sys

from constraint.generation.daily_generator import main

if __name__ == "__main__":
    sys.exit(main())
