"""Module wrapper so running ``python -m dicomlocal.cli`` matches the console script."""

from dicomlocal.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
