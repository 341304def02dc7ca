# backend/src/unslop/config.py
"""Configuration system for the Unslop backend.

This module handles loading settings from environment variables and an INI
file in the data directory, providing sensible defaults, and computing the
paths of the local databases and logs.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "storage": {
        "cache_ttl_ms": (int, 5000, 0, 600_000, "Read cache lifetime in milliseconds"),
        "directory_access": (bool, True, None, None, "Whether directory grants are supported"),
        "handles_db": (str, "handles.db", None, None, "Directory handle store file name"),
        "state_db": (str, "project_state.db", None, None, "Project state store file name"),
        "preferences_db": (str, "preferences.db", None, None, "Credential store file name"),
        "max_pending_downloads": (int, 50, 1, 1000, "Downloads kept for the client"),
    },
    "llm": {
        "default_model": (
            str,
            "google/gemini-3-flash-preview",
            None,
            None,
            "Model used when the user has not picked one",
        ),
        "max_tokens": (int, 8192, 256, 32768, "Max response tokens"),
        "default_temperature": (float, 0.7, 0.0, 2.0, "Default LLM temperature"),
        "api_base": (str, "https://openrouter.ai/api/v1", None, None, "OpenRouter endpoint"),
    },
    "paths": {
        "logs_dir": (str, "logs", None, None, "Logs directory name"),
    },
}


@dataclass(frozen=True)
class StorageConfig:
    """Local persistence configuration."""

    cache_ttl_ms: int
    directory_access: bool
    handles_db: str
    state_db: str
    preferences_db: str
    max_pending_downloads: int


@dataclass(frozen=True)
class LLMConfig:
    """LLM client configuration."""

    default_model: str
    max_tokens: int
    default_temperature: float
    api_base: str


@dataclass(frozen=True)
class PathsConfig:
    """Path names configuration."""

    logs_dir: str


def _defaults(section: str) -> dict[str, Any]:
    return {key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA[section].items()}


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: bool | int | float | str
            try:
                if typ is bool:
                    value = raw_value.lower() in ("true", "1", "yes", "on")
                elif typ is int:
                    value = int(raw_value)
                elif typ is float:
                    value = float(raw_value)
                else:
                    value = raw_value
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = default

        if typ in (int, float) and value is not None:
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    return result


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Returns a Config with a placeholder data_dir that load_settings()
    replaces with the directory resolved from the environment.

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path)

    storage = StorageConfig(**_load_section(parser, "storage", CONFIG_SCHEMA["storage"]))
    llm = LLMConfig(**_load_section(parser, "llm", CONFIG_SCHEMA["llm"]))
    paths = PathsConfig(**_load_section(parser, "paths", CONFIG_SCHEMA["paths"]))

    return Config(
        data_dir=Path("."),  # Placeholder, will be overwritten
        storage=storage,
        llm=llm,
        paths=paths,
    )


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    data_dir: Path = None  # type: ignore[assignment]  # Set in __post_init__ if None
    workspace_base_path: Optional[Path] = None
    defaults_dir: Optional[Path] = None
    openrouter_api_key: Optional[str] = None
    model_override: Optional[str] = None

    storage: StorageConfig = None  # type: ignore[assignment]
    llm: LLMConfig = None  # type: ignore[assignment]
    paths: PathsConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.data_dir is None:
            object.__setattr__(self, "data_dir", Path.home() / ".unslop")
        if self.storage is None:
            object.__setattr__(self, "storage", StorageConfig(**_defaults("storage")))
        if self.llm is None:
            object.__setattr__(self, "llm", LLMConfig(**_defaults("llm")))
        if self.paths is None:
            object.__setattr__(self, "paths", PathsConfig(**_defaults("paths")))

    @property
    def handles_db_path(self) -> Path:
        """Path to the directory handle store."""
        return self.data_dir / self.storage.handles_db

    @property
    def state_db_path(self) -> Path:
        """Path to the completion-state store."""
        return self.data_dir / self.storage.state_db

    @property
    def preferences_db_path(self) -> Path:
        """Path to the credential store."""
        return self.data_dir / self.storage.preferences_db

    @property
    def logs_path(self) -> Path:
        return self.data_dir / self.paths.logs_dir

    @property
    def llm_log_path(self) -> Path:
        """Path to LLM query log file."""
        return self.logs_path / "llm-queries.jsonl"

    @property
    def cache_ttl_ms(self) -> int:
        return self.storage.cache_ttl_ms


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the application.
    Use load_settings.cache_clear() to reload settings.

    Returns:
        Config object populated from environment variables and config.ini
        in the data directory.
    """
    data_dir_str = os.getenv("UNSLOP_DATA_DIR")
    data_dir = Path(data_dir_str) if data_dir_str else Path.home() / ".unslop"

    config_file = data_dir / "config.ini"
    try:
        config_exists = config_file.exists()
    except PermissionError:
        config_exists = False
    base_config = _load_config(config_file if config_exists else None)

    base_path_str = os.getenv("WORKSPACE_BASE_PATH")
    workspace_base_path = Path(base_path_str).resolve() if base_path_str else Path.home()

    defaults_dir_str = os.getenv("UNSLOP_DEFAULTS_DIR")

    return Config(
        data_dir=data_dir,
        workspace_base_path=workspace_base_path,
        defaults_dir=Path(defaults_dir_str) if defaults_dir_str else None,
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
        model_override=os.getenv("UNSLOP_MODEL"),
        storage=base_config.storage,
        llm=base_config.llm,
        paths=base_config.paths,
    )
