"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments  (the command-line flags)
  2. Environment variables  (MDSERVE__SERVER__PORT=9090)
  3. mdserve.yaml           (searched in cwd, then platform config dir)
  4. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
import structlog
from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

log = structlog.get_logger()

TOC_POSITIONS = ("left", "right")


def _find_config_file() -> str | None:
    """Return the path of the first mdserve.yaml found, or None."""
    candidates = [
        Path("mdserve.yaml"),
        Path(platformdirs.user_config_dir("mdserve")) / "mdserve.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class DocsSettings(BaseModel):
    root: str = "."
    extensions: list[str] = [".md"]

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class TocSettings(BaseModel):
    position: str = "left"

    @field_validator("position")
    @classmethod
    def validate_position(cls, v: str) -> str:
        # Unknown positions fall back to the default rather than failing startup
        if v not in TOC_POSITIONS:
            log.warning("toc_position_invalid", position=v, fallback="left")
            return "left"
        return v


class AuthSettings(BaseModel):
    username: str | None = None
    password: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.username) and bool(self.password)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: MDSERVE__SERVER__PORT=9090
        env_prefix="MDSERVE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    docs: DocsSettings = DocsSettings()
    toc: TocSettings = TocSettings()
    auth: AuthSettings = AuthSettings()
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
