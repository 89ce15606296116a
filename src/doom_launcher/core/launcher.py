"""Assemble source-port arguments and start the game."""

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from doom_launcher.catalog.schemas import Executable, LauncherConfig
from doom_launcher.core.flatten import flatten
from doom_launcher.core.session import Session, SessionView

logger = logging.getLogger(__name__)


@dataclass
class LaunchResult:
    """Result of starting the source port."""

    success: bool
    message: str
    arguments: list[str] = field(default_factory=list)
    pid: int | None = None


def build_launch_arguments(
    config: LauncherConfig, session: Session, extra_args: Iterable[str] = ()
) -> list[str]:
    """Arguments in launch order.

    ``-iwad`` (mod override, else level override, else omitted), ``-file``,
    level paths, mutator paths in selection order, mod paths, then any
    pass-through arguments.
    """
    view = SessionView(config, session)
    mod = view.mod
    level = view.level

    args: list[str] = []
    if mod is not None and mod.has_iwad:
        args += ["-iwad", mod.iwad.strip()]
    elif level is not None and level.has_iwad:
        args += ["-iwad", level.iwad.strip()]

    args.append("-file")
    args += flatten(view.levels, level)
    for mutator in view.mutator_entries:
        args += flatten(view.mutators, mutator)
    args += flatten(view.mods, mod)

    args += list(extra_args)
    return args


def format_command_line(tokens: Iterable[str]) -> str:
    """Single-string form; tokens containing a space are quoted."""
    return " ".join(f'"{t}"' if " " in t else t for t in tokens)


def resolve_executable(path: str) -> Path | None:
    """Literal path if it exists, else the program found on PATH."""
    if not path.strip():
        return None
    exe_path = Path(path)
    if exe_path.exists():
        return exe_path
    found = shutil.which(path)
    return Path(found) if found else None


class GameLauncher:
    """Starts a source port without waiting for it."""

    def __init__(self, executable: Executable):
        self.executable = executable

    def launch(self, arguments: list[str]) -> LaunchResult:
        exe_path = resolve_executable(self.executable.path)
        if exe_path is None:
            return LaunchResult(
                success=False,
                message=f"Executable not found: {self.executable.path or '(not set)'}",
                arguments=arguments,
            )

        logger.info("Launching %s %s", exe_path, format_command_line(arguments))
        try:
            proc = subprocess.Popen(
                [str(exe_path), *arguments],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            return LaunchResult(
                success=False,
                message=f"Failed to launch {exe_path}: {e}",
                arguments=arguments,
            )

        return LaunchResult(
            success=True,
            message=f"Launched {self.executable.code or exe_path.name}",
            arguments=arguments,
            pid=proc.pid,
        )
