"""Convert the old doomlauncher.bat into catalog entries.

The batch script had two parts: ECHO menu lines listing ``code`` and
title per category, and one ``:label`` block per mod holding a
``start`` command with the WAD paths. Line ranges are fixed per script,
so they are passed in (defaults match the original script).
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from doom_launcher.catalog.schemas import Entry

logger = logging.getLogger(__name__)

# Quoted run or whitespace-free run
_TOKEN_RE = re.compile(r'"[^"]*"|[^ ]+')

# Fixed columns in the ECHO menu lines
_TITLE_CODE_START = 5
_TITLE_CODE_END = 9
_TITLE_TEXT_START = 12


@dataclass(frozen=True)
class TitleRange:
    """Menu lines [start, end) whose entries belong to ``category``."""

    start: int
    end: int
    category: str


DEFAULT_MOD_RANGE = (511, 866)
DEFAULT_TITLE_RANGES = [
    TitleRange(19, 24, "Mostly Vanilla"),
    TitleRange(27, 97, "Gameplay Mods"),
    TitleRange(100, 106, "Total Conversions"),
    TitleRange(109, 113, "BRUTAL DOOM"),
]
DEFAULT_PATH_PREFIX = "E:\\DOOM"


class BatchParseError(Exception):
    """Batch script does not fit the given line ranges."""
    pass


def _check_range(start: int, end: int, lines: list[str]) -> None:
    if not 0 <= start <= end <= len(lines):
        raise BatchParseError(
            f"Line range {start}:{end} is outside the script ({len(lines)} lines)"
        )


def parse_titles(lines: list[str], title_range: TitleRange) -> dict[str, tuple[str, str]]:
    """Map lower-cased code -> (title, category) for one menu section."""
    _check_range(title_range.start, title_range.end, lines)
    titles: dict[str, tuple[str, str]] = {}
    for line in lines[title_range.start:title_range.end]:
        code = line[_TITLE_CODE_START:_TITLE_CODE_END].strip()
        if not code:
            continue
        titles[code.casefold()] = (line[_TITLE_TEXT_START:].strip(), title_range.category)
    return titles


def parse_mod_blocks(
    lines: list[str], start: int, end: int, path_prefix: str = DEFAULT_PATH_PREFIX
) -> list[Entry]:
    """Read ``:label`` ... ``EXIT /B`` blocks into entries (code, paths, iwad)."""
    _check_range(start, end, lines)
    entries: list[Entry] = []
    wip = Entry()

    for line in lines[start:end]:
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(":"):
            wip.code = stripped[1:].strip()
        elif stripped.lower().startswith("cd"):
            continue
        elif stripped.lower().startswith("start"):
            for token in _TOKEN_RE.findall(stripped):
                token = token.strip('"')
                if token.lower().startswith(path_prefix.lower()):
                    wip.paths.append(token)
                elif token.lower().endswith(".wad"):
                    wip.iwad = token
        elif stripped.upper() == "EXIT /B":
            entries.append(wip)
            wip = Entry()

    return entries


def _creation_year(path: str) -> int | None:
    p = Path(path)
    if not p.exists():
        return None
    return datetime.fromtimestamp(p.stat().st_ctime).year


def parse_batch_script(
    lines: list[str],
    *,
    mod_range: tuple[int, int] = DEFAULT_MOD_RANGE,
    title_ranges: list[TitleRange] | None = None,
    path_prefix: str = DEFAULT_PATH_PREFIX,
) -> list[Entry]:
    """Parse mod blocks and attach titles, categories and years."""
    titles: dict[str, tuple[str, str]] = {}
    for title_range in title_ranges if title_ranges is not None else DEFAULT_TITLE_RANGES:
        titles.update(parse_titles(lines, title_range))

    entries = parse_mod_blocks(lines, *mod_range, path_prefix=path_prefix)
    for entry in entries:
        title = titles.get(entry.code.casefold())
        if title is None:
            logger.warning("No menu title for %s", entry.code or "(unlabelled block)")
        else:
            entry.description, entry.category = title
        if entry.paths:
            entry.year = _creation_year(entry.paths[0])

    logger.info("Parsed %d entries from batch script", len(entries))
    return entries


def entries_to_json(entries: list[Entry]) -> str:
    """v1-style flat list, nulls and empty lists omitted."""
    data = []
    for entry in entries:
        item = entry.model_dump(by_alias=True, exclude_none=True)
        if not item.get("Tags"):
            item.pop("Tags", None)
        data.append(item)
    return json.dumps(data, indent=2)


def write_entries(entries: list[Entry], output_path: Path) -> Path:
    output_path.write_text(entries_to_json(entries) + "\n", encoding="utf-8")
    logger.info("Wrote %d entries to %s", len(entries), output_path)
    return output_path
