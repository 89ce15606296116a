"""Configuration and environment loading."""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from doom_launcher.constants import (
    DEFAULT_HISTORY_FILE,
    DEFAULT_SETTINGS_FILE,
    MUTATOR_MENU_TOKEN,
    RANDOM_TOKEN,
)

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Files
    settings_path: Path = Field(
        default=Path(DEFAULT_SETTINGS_FILE), alias="DOOM_SETTINGS_PATH"
    )
    history_path: Path | None = Field(
        default=Path(DEFAULT_HISTORY_FILE), alias="DOOM_HISTORY_PATH"
    )

    # Executable code to launch with; first executable when unset
    executable: str | None = Field(default=None, alias="DOOM_EXECUTABLE")

    # Menu directives
    mutator_token: str = Field(default=MUTATOR_MENU_TOKEN, alias="DOOM_MUTATOR_TOKEN")
    random_token: str = Field(default=RANDOM_TOKEN, alias="DOOM_RANDOM_TOKEN")

    model_config = {"env_file": ".env", "extra": "ignore", "populate_by_name": True}

    @field_validator("history_path", mode="before")
    @classmethod
    def blank_history_disables(cls, v):
        """An empty DOOM_HISTORY_PATH turns the history log off."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def history_enabled(self) -> bool:
        return self.history_path is not None


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
