"""Runtime configuration loaded from the environment."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings(BaseSettings):
    """Settings for the dashboard backend.

    When ``backend_url`` is set the hosted REST backend is used, otherwise a
    local SQLite database at ``database_path``.
    """

    backend_url: str = ""
    backend_key: str = ""
    database_path: Path = Field(default_factory=lambda: DATA_DIR / "mohero.db")
    log_level: str = "INFO"
    log_file: str | None = None

    # Manager affordances
    enable_edit: bool = True
    enable_reorder: bool = True
    enable_bank_panel: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MOHERO_",
        extra="ignore",
    )

    @field_validator("backend_url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        # Values copied from dashboards sometimes carry a trailing '%'
        return value.strip().rstrip("%").rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def uses_rest_backend(self) -> bool:
        return bool(self.backend_url)


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, with optional overrides."""
    return Settings(**overrides)
