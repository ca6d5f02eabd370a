"""
Tests for the CLI — flag parsing, help/usage exits, and run reporting.
"""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from src.core.models.selection import Selection
from src.core.services.tool_install.errors import DependencyInstallError, RuntimeMissingError
from src.main import cli


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    monkeypatch.delenv("TRELLIS_SETUP_CONFIG", raising=False)
    monkeypatch.delenv("TRELLIS_SETUP_LOG_FILE", raising=False)
    return CliRunner()


class TestHelpAndUsage:
    """Help exits 0, usage errors exit 1, nothing gets installed."""

    @pytest.mark.parametrize("args", [[], ["-h"], ["--help"], ["--basic", "--help"]])
    def test_help_exits_zero(self, runner, args):
        with patch("src.main.provision") as provision:
            result = runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "--flash-attn" in result.output
        assert "--all" in result.output
        provision.assert_not_called()

    def test_help_wins_over_unknown_flag(self, runner):
        with patch("src.main.provision") as provision:
            result = runner.invoke(cli, ["--bogus", "-h"])
        assert result.exit_code == 0
        provision.assert_not_called()

    def test_help_lists_every_component(self, runner):
        result = runner.invoke(cli, ["--help"])
        for flag in ("--basic", "--flash-attn", "--cumesh", "--o-voxel",
                     "--flexgemm", "--nvdiffrast", "--nvdiffrec"):
            assert flag in result.output
        assert "conda activate" in result.output

    def test_unknown_flag_exits_one(self, runner):
        with patch("src.main.provision") as provision:
            result = runner.invoke(cli, ["--bogus"])
        assert result.exit_code == 1
        assert "--bogus" in result.output
        assert "--basic" in result.output
        provision.assert_not_called()

    def test_positional_argument_exits_one(self, runner):
        with patch("src.main.provision") as provision:
            result = runner.invoke(cli, ["basic"])
        assert result.exit_code == 1
        provision.assert_not_called()

    def test_only_ambient_flags_shows_help(self, runner):
        with patch("src.main.provision") as provision:
            result = runner.invoke(cli, ["--verbose"])
        assert result.exit_code == 0
        assert "--basic" in result.output
        provision.assert_not_called()

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestSelection:
    """Flags map onto the Selection handed to the orchestrator."""

    def _selection(self, runner, tmp_path: Path, args: list[str]) -> Selection:
        with runner.isolated_filesystem(temp_dir=tmp_path), \
             patch("src.main.provision") as provision:
            result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        return provision.call_args[0][0]

    def test_individual_flags(self, runner, tmp_path):
        sel = self._selection(runner, tmp_path, ["--basic", "--cumesh"])
        assert sel.requested() == ["basic", "cumesh"]

    def test_all_excludes_o_voxel(self, runner, tmp_path):
        sel = self._selection(runner, tmp_path, ["--all"])
        assert sel.o_voxel is False
        assert sel == Selection.from_flags(
            basic=True, flash_attn=True, nvdiffrast=True,
            nvdiffrec=True, cumesh=True, flexgemm=True,
        )

    def test_all_plus_o_voxel(self, runner, tmp_path):
        sel = self._selection(runner, tmp_path, ["--all", "--o-voxel"])
        assert sel.o_voxel is True
        assert sel.basic is True

    def test_repeated_flag_is_idempotent(self, runner, tmp_path):
        sel = self._selection(runner, tmp_path, ["--basic", "--basic"])
        assert sel.requested() == ["basic"]


class TestRun:
    """End-to-end through the orchestrator with a fake interpreter."""

    def test_already_installed_reports_skipped(self, runner, fake_env, tmp_path):
        fake_env.mark_installed("basic", "flash_attn")
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["--basic", "--flash-attn"])
        assert result.exit_code == 0, result.output
        assert "Installation Completed Successfully" in result.output
        assert "already installed" in result.output
        assert "You can now use Trellis2!" in result.output
        assert fake_env.acquisitions == []

    def test_quiet_suppresses_progress(self, runner, fake_env, tmp_path):
        fake_env.mark_installed("flash_attn")
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["--flash-attn", "-q"])
        assert result.exit_code == 0
        assert "Trellis2 Installation Script" not in result.output
        assert "Installation Completed Successfully" in result.output

    def test_missing_o_voxel_dir_exits_one(self, runner, fake_env, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["--o-voxel"])
        assert result.exit_code == 1
        assert "o-voxel directory not found" in result.output
        assert fake_env.acquisitions == []

    def test_setup_error_prints_remedy(self, runner, tmp_path):
        err = RuntimeMissingError(
            "Python not found!",
            remedy="Please activate your conda environment first:\n  conda activate trellis2",
        )
        with runner.isolated_filesystem(temp_dir=tmp_path), \
             patch("src.main.provision", side_effect=err):
            result = runner.invoke(cli, ["--basic"])
        assert result.exit_code == 1
        assert "Python not found!" in result.output
        assert "conda activate trellis2" in result.output

    def test_failure_prints_detail_tail(self, runner, tmp_path):
        detail = "\n".join(f"line {i}" for i in range(30))
        err = DependencyInstallError(
            "Failed to install flash-attn 2.7.3: Command failed (exit 1)",
            component="flash_attn",
            remedy="Flash-attention requires the CUDA toolkit to be installed.",
            detail=detail,
        )
        with runner.isolated_filesystem(temp_dir=tmp_path), \
             patch("src.main.provision", side_effect=err):
            result = runner.invoke(cli, ["--flash-attn"])
        assert result.exit_code == 1
        assert "line 29" in result.output
        assert "│ line 20" in result.output
        assert "│ line 19" not in result.output
        assert "CUDA toolkit" in result.output

    def test_bad_config_exits_one(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path), \
             patch("src.main.provision") as provision:
            Path("trellis-setup.yml").write_text("unknown_key: 1\n")
            result = runner.invoke(cli, ["--basic"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        provision.assert_not_called()

    def test_bad_log_file_does_not_abort(self, runner, fake_env, tmp_path, monkeypatch):
        monkeypatch.setenv("TRELLIS_SETUP_LOG_FILE", str(tmp_path / "missing" / "run.log"))
        fake_env.mark_installed("flash_attn")
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["--flash-attn"])
        assert result.exit_code == 0, result.output
        assert "Installation Completed Successfully" in result.output

    def test_failure_lists_only_confirmed_components(self, runner, fake_env, tmp_path, monkeypatch):
        tmp_root = tmp_path / "tmp"
        tmp_root.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_root))
        fake_env.mark_installed("flash_attn")
        fake_env.fail("https://github.com/NVlabs/nvdiffrast.git@v0.4.0", stage="clone")

        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["--flash-attn", "--nvdiffrast", "--flexgemm"])

        assert result.exit_code == 1
        assert "Failed to clone nvdiffrast v0.4.0 repository" in result.output
        completed = result.output.split("Completed before the failure:", 1)[1]
        assert "Flash-attention" in completed
        assert "nvdiffrast" not in completed
        assert "FlexGEMM" not in result.output
        assert "Installation Completed Successfully" not in result.output
        assert list(tmp_root.glob("trellis2_extensions_*")) == []
