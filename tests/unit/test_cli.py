"""
Tests for the command-line entry point.
"""

from unittest.mock import patch

import pytest

from liverun import __version__
from liverun.cli.main import build_parser, collect_overrides, main_cli
from liverun.orchestration import EXIT_OK


@pytest.mark.unit
class TestParser:
    def test_overrides_skip_unset_flags(self):
        args = build_parser().parse_args(["-w", "src/*,main.go", "-b", "make"])

        assert collect_overrides(args) == {
            "watch": "src/*,main.go",
            "build": "make",
            "run": None,
            "redirect_input": None,
        }

    def test_redirect_input_flag(self):
        args = build_parser().parse_args(["-i"])
        assert collect_overrides(args)["redirect_input"] is True


@pytest.mark.unit
class TestMainCli:
    def test_version_action(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["version"])

        assert exc_info.value.code == 0
        assert f"liverun version {__version__}" in capsys.readouterr().out

    def test_unknown_config_key_exits(self, in_temp_dir):
        (in_temp_dir / "liverun.toml").write_text('[liverun]\nbiuld = "make"\n')

        with pytest.raises(SystemExit) as exc_info:
            main_cli([])
        assert exc_info.value.code == 1

    def test_missing_explicit_config_exits(self, in_temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["-c", "nope.toml"])
        assert exc_info.value.code == 1

    def test_unreadable_config_exits(self, in_temp_dir):
        (in_temp_dir / "conf.d").mkdir()

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["-c", "conf.d"])
        assert exc_info.value.code == 1

    def test_malformed_config_exits(self, in_temp_dir):
        (in_temp_dir / "liverun.toml").write_text("[liverun\n")

        with pytest.raises(SystemExit) as exc_info:
            main_cli([])
        assert exc_info.value.code == 1

    def test_session_exit_code_is_propagated(self, in_temp_dir):
        with patch("liverun.cli.main.LiveSession") as session_cls:
            session_cls.return_value.run.return_value = EXIT_OK
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["-b", "make", "-r", "./app"])

        assert exc_info.value.code == EXIT_OK
        config = session_cls.call_args.args[0]
        assert config.build_template == "make"
        assert config.run_template == "./app"
