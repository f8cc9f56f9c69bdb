"""Allows `python -m notes_api` to start the server."""

from notes_api.main import run

if __name__ == "__main__":
    run()
