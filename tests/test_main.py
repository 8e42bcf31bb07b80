"""Tests for CLI argument handling in main.py."""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from clipferry.clipboard import ClipboardUnavailable
from clipferry.main import main


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_direction_specified_exits_with_code_2(self):
        """Test that missing --macos or --wayland gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_both_directions_specified_exits_with_code_2(self):
        """Test that both --macos and --wayland gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--macos", "--wayland"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_invalid_interval_exits_with_code_2(self):
        """Test that a zero interval is rejected by click."""
        runner = CliRunner()
        result = runner.invoke(main, ["--macos", "--interval", "0"])
        assert result.exit_code == 2

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--macos" in result.output
        assert "--wayland" in result.output


class TestRunMode:
    """Tests for dispatching to the monitor."""

    def test_options_build_config(self):
        """Test options are passed through to the monitor's config."""
        runner = CliRunner()
        with patch("clipferry.main._run_mode") as run_mode:
            result = runner.invoke(
                main, ["--wayland", "--host", "mac.lan", "--interval", "250", "--max-jobs", "2"]
            )
        assert result.exit_code == 0
        direction, config = run_mode.call_args.args
        assert direction == "wayland"
        assert config.remote_host == "mac.lan"
        assert config.poll_interval_ms == 250
        assert config.max_in_flight == 2
        assert config.remote_user == "cgenco"

    def test_environment_variables(self):
        """Test CLIPFERRY_* variables configure the monitor."""
        runner = CliRunner()
        with patch("clipferry.main._run_mode") as run_mode:
            result = runner.invoke(
                main, ["--macos"], env={"CLIPFERRY_HOST": "desk.lan", "CLIPFERRY_INTERVAL": "750"}
            )
        assert result.exit_code == 0
        _, config = run_mode.call_args.args
        assert config.remote_host == "desk.lan"
        assert config.poll_interval_ms == 750

    def test_unavailable_clipboard_exits_with_code_1(self):
        """Test a startup clipboard failure aborts with an error."""
        runner = CliRunner()
        with patch(
            "clipferry.app.run_monitor", side_effect=ClipboardUnavailable("wl-paste not found")
        ):
            result = runner.invoke(main, ["--wayland"])
        assert result.exit_code == 1
        assert "wl-paste not found" in result.output
