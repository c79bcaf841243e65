"""Allows `python -m utilbox`."""

from utilbox.main import run

if __name__ == "__main__":
    run()
