from importlib.metadata import version

import foxcfg
from foxcfg.cli import app
from typer.testing import CliRunner


def test_package_imports() -> None:
    assert foxcfg.__version__ == version("foxcfg")


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("get", "dump", "locate"):
        assert command in result.stdout
