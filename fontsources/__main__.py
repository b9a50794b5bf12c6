"""Run the discovery CLI with ``python -m fontsources``."""

from __future__ import annotations

from fontsources.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
