"""
Package entry point.

Allows running the application via:

    python -m tripschedule

This simply forwards execution to tripschedule.cli.main().
"""

from tripschedule.cli import main

if __name__ == "__main__":
    main()
