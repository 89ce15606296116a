"""Append-only log of launched selections."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class HistoryLog:
    """One line per launch: mod, level and mutator codes separated by spaces."""

    def __init__(self, path: Path):
        self.path = path

    def append(self, summary: str) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(summary.strip() + "\n")
        logger.debug("Appended %r to %s", summary, self.path)
