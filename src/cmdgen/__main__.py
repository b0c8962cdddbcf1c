"""cmdgen CLI bootstrap."""

from __future__ import annotations

from cmdgen.cli import app

if __name__ == "__main__":
    app()
