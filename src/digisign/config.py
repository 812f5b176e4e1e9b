"""Configuration loading utilities."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import default_store_dir, runtime_config_dir

_ENV_REGISTRY_URL = "DIGISIGN_REGISTRY_URL"
_ENV_LOG_LEVEL = "DIGISIGN_LOG_LEVEL"
_ENV_STORE_DIR = "DIGISIGN_STORE_DIR"


class RegistryConfig(BaseModel):
    url: str = Field(default="http://localhost:3000", description="Base URL of the key registry")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("Registry URL must use http or https")
        return value.rstrip("/")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class StoreConfig(BaseModel):
    dir: Path = Field(default_factory=default_store_dir, description="File-backed registry directory")


class AppConfig(BaseModel):
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".digisign" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def _apply_env(config: AppConfig) -> AppConfig:
    updates = {}
    url = os.getenv(_ENV_REGISTRY_URL)
    if url:
        updates["registry"] = RegistryConfig(url=url, timeout=config.registry.timeout)
    level = os.getenv(_ENV_LOG_LEVEL)
    if level:
        updates["logging"] = LoggingConfig(level=level)
    store = os.getenv(_ENV_STORE_DIR)
    if store:
        updates["store"] = StoreConfig(dir=Path(store).expanduser())
    return config.model_copy(update=updates) if updates else config


def load_config(path: Optional[Path] = None) -> AppConfig:
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            try:
                return _apply_env(AppConfig.model_validate(data))
            except ValidationError as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return _apply_env(DEFAULT_CONFIG.model_copy(deep=True))


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "LoggingConfig",
    "RegistryConfig",
    "StoreConfig",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
