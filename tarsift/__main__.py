"""
Module entry-point that makes the package runnable with

    python -m tarsift

The behaviour is identical to the *tarsift-cli* console script because the
Click **group** imported below performs all CLI dispatching.
"""

from tarsift.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
