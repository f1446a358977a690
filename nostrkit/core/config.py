"""nostrkit.core.config

Two config surfaces only:
1) ``config/default.yaml``
2) Environment variables (``NOSTRKIT_`` prefix; secrets live only here)

Everything else is derived.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from nostrkit.core.exceptions import ConfigError

MIN_KDF_ITERATIONS = 100_000


def _default_identity_path() -> Path:
    return Path("~/.nostrkit/identity.key").expanduser()


class IdentityConfig(BaseModel):
    path: Path = Field(default_factory=_default_identity_path)
    kdf_iterations: int = 480_000

    @field_validator("path", mode="after")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("kdf_iterations")
    @classmethod
    def iterations_floor(cls, v: int) -> int:
        if v < MIN_KDF_ITERATIONS:
            raise ValueError(f"kdf_iterations must be >= {MIN_KDF_ITERATIONS}")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str) -> str:
        name = v.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {v}")
        return name


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "NOSTRKIT_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must hold a mapping: {path}")
        return cls(**raw)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Explicit file, else ``./config/default.yaml`` if present, else env + defaults."""

        if path is not None:
            return cls.from_yaml(path)
        default = Path.cwd() / "config" / "default.yaml"
        if default.exists():
            return cls.from_yaml(default)
        return cls()
