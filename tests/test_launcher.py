"""Tests for launch argument assembly and process start."""

from pathlib import Path
from unittest.mock import patch

import pytest

from doom_launcher.catalog.catalog import InvariantViolation, SelectionRef
from doom_launcher.catalog.schemas import Entry, Executable, LauncherConfig
from doom_launcher.core.history import HistoryLog
from doom_launcher.core.launcher import (
    GameLauncher,
    build_launch_arguments,
    format_command_line,
)
from doom_launcher.core.session import Session, SessionView


@pytest.fixture
def config():
    return LauncherConfig(
        executables=[Executable(code="GZ", path="/usr/bin/gzdoom")],
        mods={
            "Gameplay Mods": [
                Entry(code="M1", paths=["/a/m1.wad"]),
                Entry(code="M2", parent_code="M1", paths=["/a/m2.wad"]),
                Entry(code="TC", iwad="/iwads/tc.wad", paths=["/a/tc.pk3"]),
                Entry(code="BROKEN", parent_code="GONE", paths=["/a/broken.wad"]),
            ],
        },
        levels={
            "Megawads": [
                Entry(code="L1", paths=["/a/l1.wad"]),
                Entry(code="L2", iwad="/iwads/plutonia.wad", paths=["/a/l2.wad"]),
            ],
        },
        mutators={
            "Weapons": [
                Entry(code="W1", paths=["/a/w1.pk3"]),
                Entry(code="W2", parent_code="W1", paths=["/a/w2.pk3"]),
            ],
            "Monsters": [Entry(code="X1", paths=["/a/x1.pk3"])],
        },
    )


def _session(mod=None, level=None, mutators=()):
    return Session(
        mod=SelectionRef("Gameplay Mods", mod) if mod is not None else None,
        level=SelectionRef("Megawads", level) if level is not None else None,
        mutators=list(mutators),
    )


class TestBuildLaunchArguments:
    def test_level_before_mod(self, config):
        args = build_launch_arguments(config, _session(mod=0, level=0))
        assert args == ["-file", "/a/l1.wad", "/a/m1.wad"]

    def test_inherited_mod_paths(self, config):
        args = build_launch_arguments(config, _session(mod=1))
        assert args == ["-file", "/a/m1.wad", "/a/m2.wad"]

    def test_mod_iwad_override(self, config):
        args = build_launch_arguments(config, _session(mod=2))
        assert args == ["-iwad", "/iwads/tc.wad", "-file", "/a/tc.pk3"]

    def test_level_iwad_used_when_mod_has_none(self, config):
        args = build_launch_arguments(config, _session(mod=0, level=1))
        assert args == ["-iwad", "/iwads/plutonia.wad", "-file", "/a/l2.wad", "/a/m1.wad"]

    def test_mod_iwad_wins_over_level(self, config):
        args = build_launch_arguments(config, _session(mod=2, level=1))
        assert args[:2] == ["-iwad", "/iwads/tc.wad"]

    def test_mutators_between_level_and_mod(self, config):
        session = _session(
            mod=0,
            level=0,
            mutators=[SelectionRef("Monsters", 0), SelectionRef("Weapons", 1)],
        )
        args = build_launch_arguments(config, session)
        assert args == [
            "-file",
            "/a/l1.wad",
            "/a/x1.pk3",
            "/a/w1.pk3",
            "/a/w2.pk3",
            "/a/m1.wad",
        ]

    def test_extra_args_last(self, config):
        args = build_launch_arguments(config, _session(mod=0), ["-skill", "4"])
        assert args == ["-file", "/a/m1.wad", "-skill", "4"]

    def test_empty_session_still_has_file_flag(self, config):
        assert build_launch_arguments(config, Session()) == ["-file"]

    def test_broken_parent_raises(self, config):
        with pytest.raises(InvariantViolation):
            build_launch_arguments(config, _session(mod=3))


class TestFormatCommandLine:
    def test_plain_tokens(self):
        assert format_command_line(["-file", "/a/l1.wad"]) == "-file /a/l1.wad"

    def test_paths_with_spaces_quoted(self):
        tokens = ["-file", "C:\\Games\\My Mods\\x.pk3", "/a/b.wad"]
        assert format_command_line(tokens) == '-file "C:\\Games\\My Mods\\x.pk3" /a/b.wad'


class TestGameLauncher:
    def test_missing_executable(self, tmp_path):
        exe = Executable(code="GZ", path=str(tmp_path / "nope"))
        result = GameLauncher(exe).launch(["-file"])
        assert not result.success
        assert "not found" in result.message

    def test_unset_executable(self):
        result = GameLauncher(Executable()).launch([])
        assert not result.success
        assert "(not set)" in result.message

    @patch("doom_launcher.core.launcher.subprocess.Popen")
    def test_launch_spawns_without_waiting(self, mock_popen, tmp_path):
        exe_path = tmp_path / "gzdoom"
        exe_path.write_text("")
        mock_popen.return_value.pid = 1234

        result = GameLauncher(Executable(code="GZ", path=str(exe_path))).launch(
            ["-file", "/a/m1.wad"]
        )

        assert result.success
        assert result.pid == 1234
        args, _ = mock_popen.call_args
        assert args[0] == [str(exe_path), "-file", "/a/m1.wad"]
        mock_popen.return_value.wait.assert_not_called()

    @patch("doom_launcher.core.launcher.subprocess.Popen", side_effect=OSError("denied"))
    def test_launch_os_error(self, mock_popen, tmp_path):
        exe_path = tmp_path / "gzdoom"
        exe_path.write_text("")
        result = GameLauncher(Executable(path=str(exe_path))).launch([])
        assert not result.success
        assert "denied" in result.message

    @patch("doom_launcher.core.launcher.subprocess.Popen")
    @patch("doom_launcher.core.launcher.shutil.which", return_value="/usr/games/gzdoom")
    def test_bare_name_found_on_path(self, mock_which, mock_popen):
        mock_popen.return_value.pid = 99

        result = GameLauncher(Executable(code="GZ", path="gzdoom")).launch(["-file"])

        assert result.success
        mock_which.assert_called_once_with("gzdoom")
        args, _ = mock_popen.call_args
        assert args[0] == [str(Path("/usr/games/gzdoom")), "-file"]

    @patch("doom_launcher.core.launcher.subprocess.Popen")
    @patch("doom_launcher.core.launcher.shutil.which", return_value=None)
    def test_bare_name_not_on_path(self, mock_which, mock_popen):
        result = GameLauncher(Executable(code="GZ", path="gzdoom")).launch([])
        assert not result.success
        assert "Executable not found: gzdoom" in result.message
        mock_popen.assert_not_called()


class TestHistory:
    def test_summary_codes(self, config):
        session = _session(mod=0, level=0, mutators=[SelectionRef("Weapons", 0)])
        assert SessionView(config, session).summary_codes() == "M1 L1 W1"

    def test_summary_without_level(self, config):
        assert SessionView(config, _session(mod=2)).summary_codes() == "TC"

    def test_append_lines(self, tmp_path):
        log = HistoryLog(tmp_path / "history.txt")
        log.append("M1 L1")
        log.append("TC")
        assert log.path.read_text(encoding="utf-8") == "M1 L1\nTC\n"

    def test_append_strips_whitespace(self, tmp_path):
        log = HistoryLog(tmp_path / "history.txt")
        log.append("  M1 L1 \n")
        assert log.path.read_text(encoding="utf-8") == "M1 L1\n"
