"""Selection flow, path flattening and launching."""

from doom_launcher.core.flatten import flatten
from doom_launcher.core.history import HistoryLog
from doom_launcher.core.launcher import GameLauncher, build_launch_arguments
from doom_launcher.core.resolver import resolve
from doom_launcher.core.session import Session
from doom_launcher.core.state_machine import LauncherState, SelectionStateMachine

__all__ = [
    "GameLauncher",
    "HistoryLog",
    "LauncherState",
    "SelectionStateMachine",
    "Session",
    "build_launch_arguments",
    "flatten",
    "resolve",
]
