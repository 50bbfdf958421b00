"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (SITEGALLERY__CACHE__TTL_SECONDS=30)
  2. sitegallery.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("sitegallery")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "gallery.db")


def _find_config_file() -> str | None:
    """Return the path of the first sitegallery.yaml found, or None."""
    candidates = [
        Path("sitegallery.yaml"),
        Path(platformdirs.user_config_dir("sitegallery")) / "sitegallery.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class StoreSettings(BaseModel):
    db_path: str = _DEFAULT_DB_PATH
    collection: str = "websites"


class CacheSettings(BaseModel):
    ttl_seconds: float = Field(default=60.0, gt=0)


class GallerySettings(BaseModel):
    # Size of the page sampled when resolving prev/next neighbours
    adjacency_window: int = Field(default=50, ge=1)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SITEGALLERY__STORE__DB_PATH=/tmp/g.db
        env_prefix="SITEGALLERY__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    store: StoreSettings = StoreSettings()
    cache: CacheSettings = CacheSettings()
    gallery: GallerySettings = GallerySettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
