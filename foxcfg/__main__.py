"""Module entrypoint for `python -m foxcfg`."""

from foxcfg.cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
