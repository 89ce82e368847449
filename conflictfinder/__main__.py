"""
Entry point for ``python -m conflictfinder``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
