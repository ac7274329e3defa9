"""Allow running cclens as ``python -m cclens``."""

from cclens.cli import app

if __name__ == "__main__":
    app()
