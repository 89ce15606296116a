"""Pydantic models for the launcher settings file.

Field aliases are the PascalCase keys written by the original settings
files; snake_case names are accepted too.
"""

from pydantic import BaseModel, Field, field_validator


class Entry(BaseModel):
    """A selectable mod, level or mutator."""

    code: str = Field(default="", alias="Code", description="Selection code")
    description: str = Field(default="", alias="Description", description="Display name")
    category: str | None = Field(
        None, alias="Category", description="Grouping key (v1 files only)"
    )
    parent_code: str | None = Field(
        None, alias="ParentCode", description="Code of the entry this one inherits paths from"
    )
    paths: list[str] = Field(default_factory=list, alias="Path", description="Own WAD/PK3 paths")
    tags: list[str] = Field(default_factory=list, alias="Tags", description="Filter tags")
    year: int | None = Field(None, alias="Year", description="Release year")
    iwad: str | None = Field(None, alias="IWad", description="IWAD override")

    model_config = {"populate_by_name": True}

    @field_validator("code", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Placeholder entries are written with null codes."""
        return "" if v is None else v

    @field_validator("paths", "tags", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v

    @property
    def selectable(self) -> bool:
        """Entries without a code are placeholders and never offered."""
        return bool(self.code.strip())

    @property
    def has_iwad(self) -> bool:
        return bool(self.iwad and self.iwad.strip())

    def matches(self, code: str) -> bool:
        """Case-insensitive code comparison."""
        return self.selectable and self.code.strip().casefold() == code.strip().casefold()


class Executable(BaseModel):
    """A source-port binary the launcher can start."""

    code: str = Field(default="", alias="Code", description="Selection code")
    description: str = Field(default="", alias="Description", description="Display name")
    path: str = Field(default="", alias="Path", description="Path to the executable")

    model_config = {"populate_by_name": True}

    @field_validator("code", "description", "path", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


class LauncherConfig(BaseModel):
    """Current (v2) settings layout: category -> entries per catalog."""

    executables: list[Executable] = Field(default_factory=list, alias="Executables")
    mods: dict[str, list[Entry]] = Field(default_factory=dict, alias="Mods")
    mutators: dict[str, list[Entry]] = Field(default_factory=dict, alias="Mutators")
    levels: dict[str, list[Entry]] = Field(default_factory=dict, alias="Levels")

    model_config = {"populate_by_name": True}

    @field_validator("executables", "mods", "mutators", "levels", mode="before")
    @classmethod
    def none_to_default(cls, v, info):
        if v is None:
            return [] if info.field_name == "executables" else {}
        return v

    def find_executable(self, code: str | None = None) -> Executable | None:
        """Executable by code (case-insensitive), or the first one when code is None."""
        if code is None:
            return self.executables[0] if self.executables else None
        wanted = code.strip().casefold()
        for executable in self.executables:
            if executable.code.strip().casefold() == wanted:
                return executable
        return None


class LauncherConfigV1(BaseModel):
    """Legacy (v1) settings layout: flat entry lists grouped by Category."""

    executables: list[Executable] = Field(default_factory=list, alias="Executables")
    mods: list[Entry] = Field(default_factory=list, alias="Mods")
    mutators: list[Entry] = Field(default_factory=list, alias="Mutators")
    levels: list[Entry] = Field(default_factory=list, alias="Levels")

    model_config = {"populate_by_name": True}

    @field_validator("executables", "mods", "mutators", "levels", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v
