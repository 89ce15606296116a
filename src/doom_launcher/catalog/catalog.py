"""Read-only, category-grouped view over one set of entries."""

from dataclasses import dataclass
from enum import Enum

from doom_launcher.catalog.schemas import Entry, LauncherConfig


class InvariantViolation(Exception):
    """The loaded catalog breaks an assumption the launcher cannot recover from."""
    pass


class CatalogKind(str, Enum):
    """The three independent catalogs in a settings file."""

    MODS = "mods"
    LEVELS = "levels"
    MUTATORS = "mutators"


@dataclass(frozen=True)
class SelectionRef:
    """Position of a chosen entry: category name and index within it."""

    category: str
    index: int


class Catalog:
    """Entries grouped by category.

    Lookups are global: a code is searched across every category, in
    category order and then in-category order, and the first match wins.
    """

    def __init__(self, groups: dict[str, list[Entry]], kind: CatalogKind | None = None):
        self._groups = groups
        self.kind = kind

    @property
    def categories(self) -> list[str]:
        return list(self._groups)

    def entries_in_category(self, name: str) -> list[Entry]:
        return list(self._groups.get(name, []))

    def all_entries(self) -> list[Entry]:
        """Every entry, flattened in category order."""
        return [entry for entries in self._groups.values() for entry in entries]

    def selectable_in_category(self, name: str) -> list[tuple[int, Entry]]:
        """(index, entry) pairs of entries that carry a code."""
        return [(i, e) for i, e in enumerate(self._groups.get(name, [])) if e.selectable]

    def non_empty_categories(self) -> list[str]:
        return [name for name in self._groups if self.selectable_in_category(name)]

    def locate(self, code: str) -> SelectionRef | None:
        """Find the position of the first entry whose code matches."""
        if not code or not code.strip():
            return None
        for category, entries in self._groups.items():
            for index, entry in enumerate(entries):
                if entry.matches(code):
                    return SelectionRef(category, index)
        return None

    def lookup(self, code: str) -> Entry | None:
        ref = self.locate(code)
        return self.entry_at(ref) if ref else None

    def entry_at(self, ref: SelectionRef) -> Entry:
        entries = self._groups.get(ref.category)
        if entries is None or not 0 <= ref.index < len(entries):
            raise InvariantViolation(
                f"No entry at {ref.category!r}[{ref.index}] in {self._label()}"
            )
        return entries[ref.index]

    def duplicate_codes(self) -> list[str]:
        """Codes (lower-cased) that appear more than once across categories."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for entry in self.all_entries():
            if not entry.selectable:
                continue
            key = entry.code.strip().casefold()
            if key in seen and key not in duplicates:
                duplicates.append(key)
            seen.add(key)
        return duplicates

    def sorted_listing(self) -> list[tuple[str, list[Entry]]]:
        """Display groups: catalog category order, entries by code then description."""
        listing = []
        for category, entries in self._groups.items():
            shown = sorted(
                (e for e in entries if e.selectable),
                key=lambda e: (e.code.casefold(), e.description.casefold()),
            )
            if shown:
                listing.append((category, shown))
        return listing

    def is_empty(self) -> bool:
        return not self.non_empty_categories()

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._groups.values())

    def _label(self) -> str:
        return f"{self.kind.value} catalog" if self.kind else "catalog"


def catalog_for(config: LauncherConfig, kind: CatalogKind) -> Catalog:
    """Build the catalog of one kind from a loaded config."""
    return Catalog(getattr(config, kind.value), kind)


def format_entry_line(entry: Entry) -> str:
    return f"{entry.code} - {entry.description}"
