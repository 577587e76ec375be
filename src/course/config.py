"""Configuration loading for COURSE.

The server configuration comes from a YAML file with per-field overrides
taken from environment variables named ``{PREFIX}_{SECTION}_{FIELD}``
(e.g. ``COURSE_SERVER_DB_PASSWORD``). Each section is a frozen
pydantic-settings model whose environment source outranks the values read
from the file; the result is loaded once per process and never mutated.

This module also builds the programmatic Alembic configuration used by the
migration gate.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Mapping
from importlib.resources import files
from pathlib import Path
from typing import Annotated, Any, Literal, TextIO

import yaml
from alembic.config import Config
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from sqlalchemy.engine import URL

DEFAULT_ENV_PREFIX = "COURSE_SERVER"
DEFAULT_CONFIG_PATH = "config.yaml"

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

LOG_FORMATS = ("rich", "plain")
DEFAULT_LOGGER_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "alembic": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}

Port = Annotated[int, Field(ge=0, le=65535)]


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""


def default_migration_dir() -> str:
    """Return the location of the migrations packaged with COURSE."""
    return str(files("course.adapters.db.alembic"))


def section_env_prefix(env_prefix: str, section: str) -> str:
    """Prefix of the variables overriding `section`, e.g. ``COURSE_SERVER_DB_``."""
    return f"{env_prefix}_{section}_".upper()


# --- Parsing helpers ---


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split comma/space separated items into a flat list of non-empty strings."""
    items: list[str] = []
    if isinstance(value, (tuple, list)):
        for v in value:
            items.extend([s for s in re.split(r"[,\s]+", str(v)) if s])
    else:
        items.extend([s for s in re.split(r"[,\s]+", value) if s])
    return items


def _parse_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    lvl = getattr(logging, str(value).strip().upper(), None)
    if not isinstance(lvl, int):
        raise ConfigError(f"Invalid log level: {value}")
    return lvl


def parse_logger_levels(value: str | list[str] | tuple[str, ...] | Mapping) -> dict[str, int]:
    """Parse NAME=LEVEL pairs (or a NAME: LEVEL mapping) into name -> level.

    The defaults in `DEFAULT_LOGGER_LEVELS` are kept unless overridden.

    Raises:
        ConfigError: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    if isinstance(value, Mapping):
        pairs = list(value.items())
    else:
        pairs = []
        for item in _normalize_items(value):
            try:
                name, level_str = item.split("=", 1)
            except ValueError as e:
                raise ConfigError(f"Expected NAME=LEVEL, got {item!r}") from e
            pairs.append((name, level_str))

    levels = dict(DEFAULT_LOGGER_LEVELS)
    for name, level in pairs:
        levels[str(name).strip()] = _parse_level(level)
    return levels


# --- Sections ---


class _Section(BaseSettings):
    """A config section: file values, overridden by prefixed env variables.

    The file values are passed as init arguments; the environment source is
    ordered first so it wins over them.
    """

    model_config = SettingsConfigDict(frozen=True, extra="forbid", case_sensitive=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings


class DBConfig(_Section):
    """Database connection descriptor.

    Either `url` is set, or the URL is assembled from the remaining parts.
    """

    model_config = SettingsConfigDict(env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "db"))

    url: str = ""
    driver: str = "postgresql+psycopg"
    host: str = "localhost"
    port: Port = 5432
    user: str = "course"
    password: str = ""
    name: str = "course"
    echo: bool = False

    def database_url(self) -> str:
        """Render the SQLAlchemy URL for this database."""
        if self.url:
            return self.url
        return URL.create(
            self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port or None,
            database=self.name or None,
        ).render_as_string(hide_password=False)


class RedisConfig(_Section):
    """Cache connection descriptor."""

    model_config = SettingsConfigDict(env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "redis"))

    url: str = ""
    host: str = "localhost"
    port: Port = 6379
    db: int = Field(0, ge=0)
    password: str = ""
    ttl_seconds: int = Field(300, ge=1)

    def redis_url(self) -> str:
        """Render the redis:// URL for this cache."""
        if self.url:
            return self.url
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class LogConfig(_Section):
    """Logging configuration (console verbosity, format, flight recorder)."""

    model_config = SettingsConfigDict(env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "log"))

    level: str = "INFO"
    format: Literal["rich", "plain"] = "rich"
    debug: bool = False
    color: bool = True
    flight_recorder: bool = False
    log_path: str = "course.log"
    flight_recorder_capacity: int = Field(2000, ge=1)
    force_flush: bool = False
    # NAME=LEVEL pairs in the environment, not JSON
    logger_levels: Annotated[dict[str, int], NoDecode] = Field(
        default_factory=lambda: dict(DEFAULT_LOGGER_LEVELS)
    )

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"not a valid level: {value!r}")
        return value.upper()

    @field_validator("logger_levels", mode="before")
    @classmethod
    def _parse_logger_levels(cls, value: Any) -> dict[str, int]:
        try:
            return parse_logger_levels(value)
        except ConfigError as e:
            raise ValueError(str(e)) from e

    @property
    def numeric_level(self) -> int:
        """The console level as a `logging` constant."""
        return logging.getLevelName(self.level)


class HTTPConfig(_Section):
    """Listen address of the API server and its drain bound."""

    model_config = SettingsConfigDict(env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "http"))

    host: str = "0.0.0.0"
    port: Port = 8080
    drain_timeout: int = Field(15, ge=0)


class SeedConfig(_Section):
    """Tuning for the one-shot catalog seeder."""

    model_config = SettingsConfigDict(env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "seed"))

    batch_size: int = Field(5, ge=1)


class MigrationsConfig(_Section):
    """Where schema migrations are read from (empty: packaged migrations)."""

    model_config = SettingsConfigDict(
        env_prefix=section_env_prefix(DEFAULT_ENV_PREFIX, "migrations")
    )

    dir: str = ""


class ServerConfig(BaseModel):
    """Immutable configuration for one process invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    db: DBConfig = Field(default_factory=DBConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)


SECTIONS: dict[str, type[_Section]] = {
    "db": DBConfig,
    "redis": RedisConfig,
    "log": LogConfig,
    "http": HTTPConfig,
    "seed": SeedConfig,
    "migrations": MigrationsConfig,
}


# --- Loading ---


def _describe(section: str, error: ValidationError) -> str:
    return "; ".join(
        f"{section}.{'.'.join(map(str, err['loc']))}: {err['msg']}"
        for err in error.errors()
    )


def _build_section(name: str, raw: Mapping[Any, Any], env_prefix: str) -> _Section:
    invalid = [k for k in raw if not isinstance(k, str) or k.startswith("_")]
    if invalid:
        raise ConfigError(f"{name}: invalid keys {', '.join(map(repr, invalid))}")
    values = {k: v for k, v in raw.items() if v is not None}
    try:
        return SECTIONS[name](_env_prefix=section_env_prefix(env_prefix, name), **values)
    except ValidationError as e:
        raise ConfigError(_describe(name, e)) from e


def load_server_config(
    path: str | Path,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> ServerConfig:
    """Load the server configuration from `path` plus prefixed env overrides.

    Args:
        path: YAML file to read. It must exist, an empty file means defaults.
        env_prefix: Prefix of the environment variables that override values.

    Returns:
        The loaded, validated configuration.

    Raises:
        ConfigError: If the file is missing or malformed, or a value is invalid.
    """
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {config_path}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {config_path}: {e}") from e

    try:
        raw = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{config_path}: top level must be a mapping")

    unknown = sorted(str(k) for k in raw if k not in SECTIONS)
    if unknown:
        raise ConfigError(f"unknown config sections: {', '.join(unknown)}")

    sections = {}
    for name in SECTIONS:
        section_raw = raw.get(name) or {}
        if not isinstance(section_raw, Mapping):
            raise ConfigError(f"{name}: section must be a mapping")
        sections[name] = _build_section(name, section_raw, env_prefix)
    return ServerConfig(**sections)


def build_alembic_config(
    db_url: str | None = None,
    script_location: str | Path | None = None,
    stdout: TextIO = sys.stdout,
) -> Config:
    """Build an Alembic `Config` object for COURSE's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → the given migration directory, or the packaged one

    Args:
        db_url: SQLAlchemy database URL. Can be `None` only in contexts where
            Alembic won't need to connect to the DB.
        script_location: Directory holding `env.py` and `versions/`.
        stdout: Text stream Alembic will write status lines to.

    Returns:
        An `alembic.config.Config` pointing to the migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        # Alembic's config is ConfigParser based; '%' must be escaped.
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url.replace("%", "%%"))
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(script_location) if script_location else default_migration_dir(),
    )
    return cfg
