"""Module entrypoint for `python -m emojigallery`."""

from __future__ import annotations

import sys

from .launcher import main

if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
