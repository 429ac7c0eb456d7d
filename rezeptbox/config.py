"""Settings from the environment (prefix REZEPTBOX_) and the store configuration.

get_settings() is cached, one instance per process. StoreConfig is built once
at startup and handed to the stores; nothing reads file paths from globals.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REZEPTBOX_", env_file=".env", case_sensitive=False,
    )

    # Storage
    data_dir: Path = Path(".")
    categories_file: str = "categories.json"
    recipes_file: str = "rezepte.csv"

    # API
    cors_origins: list[str] = ["*"]

    # Output
    default_lang: str = "en"

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class StoreConfig:
    categories_path: Path
    recipes_path: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        base = Path(settings.data_dir)
        return cls(
            categories_path=base / settings.categories_file,
            recipes_path=base / settings.recipes_file,
        )
