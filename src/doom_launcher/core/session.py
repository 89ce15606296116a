"""Selections made during one launcher run."""

from dataclasses import dataclass, field

from doom_launcher.catalog.catalog import Catalog, CatalogKind, SelectionRef, catalog_for
from doom_launcher.catalog.schemas import Entry, Executable, LauncherConfig


@dataclass
class Session:
    """Active executable plus the chosen mod, level and mutators.

    Only the state machine mutates a session; the launcher reads it once.
    """

    executable: Executable | None = None
    mod: SelectionRef | None = None
    level: SelectionRef | None = None
    mutators: list[SelectionRef] = field(default_factory=list)


class SessionView:
    """Resolves a session's references against the loaded catalogs."""

    def __init__(self, config: LauncherConfig, session: Session):
        self.session = session
        self.mods: Catalog = catalog_for(config, CatalogKind.MODS)
        self.levels: Catalog = catalog_for(config, CatalogKind.LEVELS)
        self.mutators: Catalog = catalog_for(config, CatalogKind.MUTATORS)

    @property
    def mod(self) -> Entry | None:
        return self.mods.entry_at(self.session.mod) if self.session.mod else None

    @property
    def level(self) -> Entry | None:
        return self.levels.entry_at(self.session.level) if self.session.level else None

    @property
    def mutator_entries(self) -> list[Entry]:
        return [self.mutators.entry_at(ref) for ref in self.session.mutators]

    def header(self) -> str:
        """One-line summary shown above every menu."""
        exe = self.session.executable.code if self.session.executable else ""
        mod = self.mod.code if self.mod else ""
        level = self.level.code if self.level else ""
        mutators = ",".join(m.code for m in self.mutator_entries)
        return f"EXEC:{exe}  MOD:{mod}  LVL:{level}  MUT:{mutators}"

    def summary_codes(self) -> str:
        """Chosen codes joined by single spaces, absent parts omitted."""
        codes = []
        if self.mod:
            codes.append(self.mod.code)
        if self.level:
            codes.append(self.level.code)
        codes.extend(m.code for m in self.mutator_entries)
        return " ".join(codes)
