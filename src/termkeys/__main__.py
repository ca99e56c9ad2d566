"""Module entrypoint for `python -m termkeys`."""

from termkeys.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
