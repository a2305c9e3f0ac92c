"""Tests for the command line interface."""

import pytest
import yaml

from openmw_config.bin.cli import cli
from openmw_config.version import __version__


@pytest.fixture(name="cli_args")
def fixture_cli_args(tmp_path, write_cfg, user_dirs):
    """Common arguments pointing the CLI at a two-file chain."""
    write_cfg(
        None, "content=Morrowind.esm\nfallback=Water_Map_Alpha,0.4\nconfig=user\n"
    )
    write_cfg("user", "content=Tribunal.esm\nfallback=Water_Map_Alpha,0.5\n")

    return [
        "-c",
        str(tmp_path),
        "--userdata",
        str(user_dirs["userdata_dir"]),
        "--userconfig",
        str(user_dirs["userconfig_dir"]),
    ]


def run_cli(argv):
    """Run the CLI, return its exit code."""
    with pytest.raises(SystemExit) as excinfo:
        cli(argv)
    return excinfo.value.code


class TestCLI:
    """Test suite for the openmw-config command."""

    def test_version(self, capsys):
        assert run_cli(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_chain(self, tmp_path, cli_args, capsys):
        assert run_cli(cli_args + ["chain"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            str(tmp_path / "openmw.cfg"),
            str(tmp_path / "user" / "openmw.cfg"),
        ]

    def test_show(self, cli_args, capsys):
        assert run_cli(cli_args + ["show"]) == 0
        out = capsys.readouterr().out
        assert "content=Morrowind.esm\ncontent=Tribunal.esm\n" in out

    def test_show_yaml(self, tmp_path, cli_args, capsys):
        assert run_cli(cli_args + ["show", "--yaml"]) == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["content"] == ["Morrowind.esm", "Tribunal.esm"]
        assert data["fallback"] == {"Water_Map_Alpha": "0.5"}
        assert data["user_config"] == str(tmp_path / "user" / "openmw.cfg")
        assert data["encoding"] is None

    def test_get(self, cli_args, capsys):
        assert run_cli(cli_args + ["get", "Water_Map_Alpha"]) == 0
        assert capsys.readouterr().out.strip() == "0.5"

    def test_get_missing(self, cli_args):
        assert run_cli(cli_args + ["get", "Missing"]) == 1

    def test_dump(self, tmp_path, cli_args, capsys):
        root = tmp_path / "openmw.cfg"
        assert run_cli(cli_args + ["dump", str(root)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("content=Morrowind.esm\n")
        assert "config=user\n" in out

    def test_check(self, cli_args):
        assert run_cli(cli_args + ["check"]) == 0

    def test_config_error(self, tmp_path):
        """Configuration errors exit with a non-zero code."""
        assert run_cli(["-c", str(tmp_path / "missing"), "chain"]) == 1
