"""Filestore configuration management.

Configuration sources (in priority order):
1. Environment variables (FILESTORE_ prefix)
2. Config file (config.yaml)
3. Defaults

Example config file::

    filedir: /srv/files
    users:
      - username: ci
        token: 6f1c0c...
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from filestore.errors import ConfigError
from filestore.validators.path import is_valid_segment

CONFIG_FILE_ENV = "FILESTORE_CONFIG_FILE"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = True
    level: Literal["debug", "info", "warning", "error"] = "info"
    json_output: bool = Field(default=False, alias="json")
    access_log: bool = False

    model_config = ConfigDict(populate_by_name=True)


class UploadConfig(BaseModel):
    """Upload pipeline configuration."""

    # Form parts larger than this spill from memory to a temp file.
    # This is not a size limit on uploads.
    memory_limit: int = Field(default=32 << 20, gt=0)
    chunk_size: int = Field(default=1 << 20, gt=0)
    max_files: int = Field(default=1000, gt=0)
    # "legacy": character allow-list only.
    # "strict": allow-list plus canonical containment under the user directory.
    path_policy: Literal["strict", "legacy"] = "strict"
    dir_mode: int = 0o755
    # Return OS error text to clients on storage failures.
    expose_errors: bool = True


class UserConfig(BaseModel):
    """Upload account: a username and its access token."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    token: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Usernames name a single directory under the file root."""
        if "/" in v or not is_valid_segment(v):
            raise ValueError(f"invalid username {v!r}: must be a single path segment")
        return v


class Settings(BaseSettings):
    """Filestore application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FILESTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    filedir: str = "./files"
    users: list[UserConfig] = Field(default_factory=list)

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; environment wins over them.
        return env_settings, init_settings, file_secret_settings

    @property
    def file_root(self) -> Path:
        return Path(self.filedir)


def _read_config_file(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Error reading YAML file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Error parsing YAML file: {path}: top level must be a mapping")
    return data


def load_settings(path: str | Path | None = None) -> Settings:
    """Build settings from an explicit YAML file.

    Raises:
        ConfigError: If the file is missing, unparseable or invalid
    """
    file_config = _read_config_file(Path(path)) if path is not None else {}
    try:
        return Settings(**file_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _find_config_file() -> Path | None:
    """Locate the configuration file.

    Looks for config file in order:
    1. FILESTORE_CONFIG_FILE environment variable
    2. ./config.yaml
    3. /etc/filestore/config.yaml
    """
    explicit = os.environ.get(CONFIG_FILE_ENV)
    if explicit:
        # An explicitly named file must exist.
        return Path(explicit)

    for path in (Path("config.yaml"), Path("/etc/filestore/config.yaml")):
        if path.exists():
            return path
    return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings(_find_config_file())
