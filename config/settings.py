"""locsync – Application Configuration.

Loads from .env file or environment variables (prefix ``I18N_``).
All catalog paths are relative to ``root_dir``.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central tool configuration."""

    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Project ---
    root_dir: Path = Path(".")

    # --- Locale catalog ---
    locales_dir: str = "src/locales"
    primary_language: str = "en"

    # --- Generated constants ---
    features_dir: str = "src/features"
    core_strings_path: str = "src/lib/errors/messages.ts"
    strings_dir: str = "lib"
    strings_file_name: str = "strings.ts"
    print_width: int = 80  # longer entries wrap onto two lines

    # --- Logging ---
    log_level: Literal["debug", "info", "warning", "error"] = "info"
    log_format: Literal["console", "json"] = "console"

    @property
    def feature_strings_path(self) -> str:
        """Strings file pattern relative to a feature directory."""
        return f"{self.strings_dir}/{self.strings_file_name}"


def get_settings(**overrides) -> Settings:
    """Factory function for settings."""
    return Settings(**overrides)
