"""Settings models, catalogs and settings file handling."""

from doom_launcher.catalog.catalog import (
    Catalog,
    CatalogKind,
    InvariantViolation,
    SelectionRef,
    catalog_for,
)
from doom_launcher.catalog.loader import (
    ConfigNotFoundError,
    ConfigParseError,
    create_default_settings,
    load_launcher_config,
    write_launcher_config,
)
from doom_launcher.catalog.schemas import Entry, Executable, LauncherConfig

__all__ = [
    "Catalog",
    "CatalogKind",
    "ConfigNotFoundError",
    "ConfigParseError",
    "Entry",
    "Executable",
    "InvariantViolation",
    "LauncherConfig",
    "SelectionRef",
    "catalog_for",
    "create_default_settings",
    "load_launcher_config",
    "write_launcher_config",
]
