"""Module entrypoint for `python -m realtalk`."""

from realtalk.cli import app

if __name__ == "__main__":
    app()
