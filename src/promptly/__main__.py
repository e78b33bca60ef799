"""Module entrypoint for `python -m promptly`."""

from __future__ import annotations

from promptly.cli import main


if __name__ == "__main__":
    main()
