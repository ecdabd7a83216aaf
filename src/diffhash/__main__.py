"""Allow running the package with: `python -m diffhash`.

This delegates to :func:`diffhash.cli.main`.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
