"""
Tests for CLI argument parser and commands.
"""

from pathlib import Path

import pytest
import responses

from mmock_setup.cli.parser import CLI
from mmock_setup.core.platform import PlatformInfo

ASSET_URL = (
    "https://github.com/jmartin82/mmock/releases/download/"
    "v3.1.6/mmock_Linux_x86_64.tar.gz"
)


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Process environment of a runner with no action inputs set."""
    for name in ("INPUT_VERSION", "INPUT_GITHUB-TOKEN", "INPUT_TEMP-DIR", "INPUT_CACHE-DIR"):
        monkeypatch.delenv(name, raising=False)
    output_file = tmp_path / "github_output"
    path_file = tmp_path / "github_path"
    output_file.touch()
    path_file.touch()
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    monkeypatch.setenv("GITHUB_PATH", str(path_file))
    return {"output": output_file, "path": path_file}


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        cli = CLI()
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        result = CLI().run([])

        assert result == 1
        assert "usage:" in capsys.readouterr().out.lower()

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "mmock-setup" in capsys.readouterr().out


class TestParsing:
    """Subcommand argument parsing."""

    def test_run_defaults(self):
        args = CLI().parse_args(["run"])

        assert args.command == "run"
        assert args.mmock_version is None
        assert args.github_token is None
        assert args.config is None

    def test_run_options(self):
        args = CLI().parse_args(
            [
                "--config",
                "mmock.yaml",
                "run",
                "--mmock-version",
                "v3.1.6",
                "--github-token",
                "abc",
                "--temp-dir",
                "/t",
                "--cache-dir",
                "/c",
            ]
        )

        assert args.config == Path("mmock.yaml")
        assert args.mmock_version == "v3.1.6"
        assert args.github_token == "abc"
        assert args.temp_dir == "/t"
        assert args.cache_dir == "/c"

    def test_resolve(self):
        args = CLI().parse_args(["resolve", "latest", "--github-token", "t"])
        assert args.spec == "latest"
        assert args.github_token == "t"

    def test_locate(self):
        args = CLI().parse_args(["locate", "3.1.6", "--os", "darwin", "--arch", "arm64"])
        assert args.mmock_version == "3.1.6"
        assert args.target_os == "darwin"
        assert args.arch == "arm64"

    def test_verbose_and_quiet(self):
        args = CLI().parse_args(["-v", "verify"])
        assert args.verbose is True
        assert args.quiet is False


class TestCommands:
    """Command dispatch."""

    def test_resolve_concrete_version(self, capsys):
        assert CLI().run(["resolve", "v3.1.6"]) == 0
        assert capsys.readouterr().out.strip().endswith("3.1.6")

    def test_locate_prints_url(self, capsys):
        result = CLI().run(["locate", "v4.0.0", "--os", "darwin", "--arch", "arm64"])

        assert result == 0
        assert capsys.readouterr().out.strip().endswith(
            "/releases/download/v4.0.0/mmock_Darwin_arm64.tar.gz"
        )

    def test_locate_unsupported_arch(self, capsys):
        result = CLI().run(["locate", "3.1.6", "--os", "win32", "--arch", "arm64"])

        assert result == 1
        assert "Unsupported windows architecture (arm64)" in capsys.readouterr().out

    def test_run_without_version_fails(self, cli_env, capsys):
        result = CLI().run(["run"])

        assert result == 1
        assert "::error::Input required and not supplied: version" in capsys.readouterr().out

    def test_run_with_missing_config_fails(self, cli_env, tmp_path, capsys):
        result = CLI().run(["--config", str(tmp_path / "nope.yaml"), "run"])

        assert result == 1
        assert "Configuration file not found" in capsys.readouterr().out

    def test_verify_without_binary_fails(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("PATH", str(tmp_path))

        assert CLI().run(["verify"]) == 1
        assert "mmock binary file not found in $PATH" in capsys.readouterr().out

    @pytest.mark.unix_only
    @responses.activate
    def test_run_installs_and_verifies(
        self, cli_env, monkeypatch, tmp_path, mmock_archive_bytes, capsys
    ):
        responses.add(responses.GET, ASSET_URL, body=mmock_archive_bytes)
        monkeypatch.setattr(
            "mmock_setup.mmock.installer.detect_platform",
            lambda: PlatformInfo("linux", "x64"),
        )
        monkeypatch.setenv("PATH", "/usr/bin:/bin")

        result = CLI().run(
            [
                "run",
                "--mmock-version",
                "v3.1.6",
                "--temp-dir",
                str(tmp_path / "temp"),
                "--cache-dir",
                str(tmp_path / "cache"),
            ]
        )

        install_dir = tmp_path / "temp" / "mmock-3.1.6"
        assert result == 0
        assert cli_env["path"].read_text() == f"{install_dir}\n"
        assert cli_env["output"].read_text() == f"mmock-bin={install_dir / 'mmock'}\n"
        assert (tmp_path / "cache" / "mmock-cache-3.1.6-linux-x64" / "mmock").is_file()
        out = capsys.readouterr().out
        assert "::group::💾 Install MMock" in out
        assert "::group::🧪 Installation check" in out
