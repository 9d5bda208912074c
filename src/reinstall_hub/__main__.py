"""
Entry point for running reinstall_hub as a module.

This file enables:
- `python -m reinstall_hub`
- `uv run python -m reinstall_hub`
"""

from __future__ import annotations

from reinstall_hub import main

if __name__ == "__main__":
    main()
