"""Configuration system for dotpkg.

This module handles loading settings from environment variables and an INI
file, providing sensible defaults, and computing derived paths for the
generated package directory structure.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os

from dotpkg.constants import CACHE_DIR, DATA_DIR, TYPES_DIR


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "generation": {
        "remove_stale_files": (
            bool,
            True,
            None,
            None,
            "Delete data files of documents that left the snapshot",
        ),
        "json_indent": (int, 2, 0, 8, "Indentation of per-document JSON files"),
    },
    "package": {
        "name": (str, "dot-dotpkg", None, None, "Name of the generated package"),
        "description": (
            str,
            "This package is auto-generated by dotpkg",
            None,
            None,
            "Description of the generated package",
        ),
        "version": (str, "0.0.0", None, None, "Static version of the generated package"),
        "runtime_module": (
            str,
            "dotpkg/client",
            None,
            None,
            "Module providing the isType helper at runtime",
        ),
    },
    "paths": {
        "artifacts_dir": (
            str,
            "node_modules/.dotpkg",
            None,
            None,
            "Generated package directory, relative to cwd",
        ),
    },
}

CONFIG_FILE_NAME = "dotpkg.ini"


@dataclass(frozen=True)
class GenerationConfig:
    """Generation behaviour configuration."""

    remove_stale_files: bool
    json_indent: int


@dataclass(frozen=True)
class PackageConfig:
    """Manifest values of the generated package."""

    name: str
    description: str
    version: str
    runtime_module: str


@dataclass(frozen=True)
class PathsConfig:
    """Path names configuration."""

    artifacts_dir: str


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

        if typ is str and not value:
            raise ConfigError(f"Value for [{section}].{key} must not be empty")

        result[key] = value

    return result


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Args:
        config_path: Path to config file. If None, uses defaults from schema.

    Returns:
        Config object with all sections populated (cwd is a placeholder)

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path)

    generation = GenerationConfig(
        **_load_section(parser, "generation", CONFIG_SCHEMA["generation"])
    )
    package = PackageConfig(**_load_section(parser, "package", CONFIG_SCHEMA["package"]))
    paths = PathsConfig(**_load_section(parser, "paths", CONFIG_SCHEMA["paths"]))

    return Config(
        cwd=Path("."),
        generation=generation,
        package=package,
        paths=paths,
    )


@dataclass(frozen=True)
class Config:
    """Complete dotpkg configuration."""

    cwd: Path
    debug: bool = False

    generation: GenerationConfig = None  # type: ignore[assignment]
    package: PackageConfig = None  # type: ignore[assignment]
    paths: PathsConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.generation is None:
            object.__setattr__(self, "generation", GenerationConfig(**_defaults("generation")))
        if self.package is None:
            object.__setattr__(self, "package", PackageConfig(**_defaults("package")))
        if self.paths is None:
            object.__setattr__(self, "paths", PathsConfig(**_defaults("paths")))

    @property
    def artifacts_path(self) -> Path:
        """Absolute path of the generated package directory."""
        return (self.cwd / self.paths.artifacts_dir).resolve()

    @property
    def data_path(self) -> Path:
        """Path to the data subdirectory."""
        return self.artifacts_path / DATA_DIR

    @property
    def types_path(self) -> Path:
        """Path to the types subdirectory."""
        return self.artifacts_path / TYPES_DIR

    @property
    def cache_path(self) -> Path:
        """Path to the debug dump directory."""
        return self.artifacts_path / CACHE_DIR


def _env_flag(name: str) -> bool:
    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


@lru_cache(maxsize=8)
def load_settings(cwd: Path | None = None) -> Config:
    """Load settings from environment variables and config file.

    Settings are cached per cwd for the lifetime of the process.
    Use load_settings.cache_clear() to reload settings.

    Args:
        cwd: Project directory holding dotpkg.ini. Defaults to the process cwd.

    Returns:
        Config object populated from environment variables and config file.

    Raises:
        ConfigError: If the config file holds invalid values.
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()

    config_file = cwd / CONFIG_FILE_NAME
    try:
        config_exists = config_file.exists()
    except PermissionError:
        config_exists = False
    base_config = _load_config(config_file if config_exists else None)

    paths = base_config.paths
    artifacts_dir = os.getenv("DOTPKG_ARTIFACTS_DIR")
    if artifacts_dir:
        paths = PathsConfig(artifacts_dir=artifacts_dir)

    return Config(
        cwd=cwd,
        debug=_env_flag("DOTPKG_DEBUG"),
        generation=base_config.generation,
        package=base_config.package,
        paths=paths,
    )
