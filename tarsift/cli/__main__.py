"""Module wrapper so running ``python -m tarsift.cli`` matches the console script."""

from tarsift.cli import main  # Re-exported Click command-group


if __name__ == "__main__":  # pragma: no cover
    main()
