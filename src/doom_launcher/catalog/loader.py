"""Settings file loading, migration and creation.

A current settings file starts with a version header line (``v2``)
followed by the JSON document. Files without a header are the legacy v1
layout (flat lists grouped by each entry's ``Category``); they are
migrated in place on first load.
"""

import json
import logging
import re
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from doom_launcher.catalog.catalog import CatalogKind, catalog_for
from doom_launcher.catalog.schemas import (
    Entry,
    Executable,
    LauncherConfig,
    LauncherConfigV1,
)
from doom_launcher.constants import (
    PLACEHOLDER_CATEGORY,
    SETTINGS_VERSION,
    SETTINGS_VERSION_HEADER,
    UNKNOWN_CATEGORY,
)

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"v(\d+)", re.IGNORECASE)


class ConfigNotFoundError(Exception):
    """Settings file does not exist."""
    pass


class ConfigParseError(Exception):
    """Settings file exists but could not be turned into a usable config."""
    pass


def load_launcher_config(settings_path: Path) -> LauncherConfig:
    """Load a settings file, migrating a v1 file to the current layout.

    Raises:
        ConfigNotFoundError: the file is missing
        ConfigParseError: bad JSON, bad shape, unknown version or duplicate codes
    """
    if not settings_path.exists():
        raise ConfigNotFoundError(f"Settings file not found: {settings_path}")

    try:
        text = settings_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"Invalid UTF-8 in {settings_path}: {e}") from e

    first_line, _, rest = text.partition("\n")
    match = _VERSION_RE.fullmatch(first_line.strip())

    if match is None:
        legacy = _parse(LauncherConfigV1, text, settings_path)
        config = migrate_v1(legacy)
        # A rejected v1 file is left as it was
        validate_unique_codes(config)
        write_launcher_config(settings_path, config)
        logger.info("Migrated v1 settings %s to %s", settings_path, SETTINGS_VERSION_HEADER)
        return config

    version = int(match.group(1))
    if version != SETTINGS_VERSION:
        raise ConfigParseError(
            f"Unsupported settings version v{version} in {settings_path}"
        )
    config = _parse(LauncherConfig, rest, settings_path)
    validate_unique_codes(config)
    return config


def _parse(model, text: str, settings_path: Path):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Invalid JSON in {settings_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"Expected a JSON object in {settings_path}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(
            f"Invalid settings in {settings_path}: {e.error_count()} error(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e


def migrate_v1(legacy: LauncherConfigV1) -> LauncherConfig:
    """Group v1 flat lists by Category into the v2 layout."""
    return LauncherConfig(
        executables=legacy.executables,
        mods=_group_by_category(legacy.mods),
        mutators=_group_by_category(legacy.mutators),
        levels=_group_by_category(legacy.levels),
    )


def _group_by_category(entries: list[Entry]) -> dict[str, list[Entry]]:
    groups: dict[str, list[Entry]] = defaultdict(list)
    for entry in entries:
        groups[entry.category or UNKNOWN_CATEGORY].append(entry)
    return dict(groups)


def validate_unique_codes(config: LauncherConfig) -> None:
    """Codes must be unique across all categories of a catalog."""
    problems = []
    for kind in CatalogKind:
        duplicates = catalog_for(config, kind).duplicate_codes()
        if duplicates:
            problems.append(f"{kind.value}: {', '.join(duplicates)}")
    if problems:
        raise ConfigParseError("Duplicate codes in " + "; ".join(problems))


def write_launcher_config(
    settings_path: Path, config: LauncherConfig, include_none: bool = False
) -> Path:
    """Write settings with the current version header."""
    data = config.model_dump(by_alias=True, exclude_none=not include_none)
    settings_path.write_text(
        f"{SETTINGS_VERSION_HEADER}\n{json.dumps(data, indent=2)}\n", encoding="utf-8"
    )
    logger.info("Wrote settings to %s", settings_path)
    return settings_path


def create_default_settings(settings_path: Path) -> Path:
    """Write a skeleton settings file showing every key."""
    config = LauncherConfig(
        executables=[Executable()],
        mods={PLACEHOLDER_CATEGORY: [Entry()]},
        mutators={PLACEHOLDER_CATEGORY: [Entry()]},
        levels={PLACEHOLDER_CATEGORY: [Entry()]},
    )
    return write_launcher_config(settings_path, config, include_none=True)
