"""Typed configuration loading and access.

Configuration is optional TOML. Every key has a built-in default, so a
missing file is never an error; a file that exists but cannot be read or
parsed is.

Example ``.super.toml``:

    [sync]
    remote = "upstream"
    default_branch = "main"

    [scan]
    max_depth = 2

    [output]
    name_width = 20
    status_width = 10
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from superrepo.platform.paths import user_config_dir

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "OutputConfig",
    "ScanConfig",
    "SyncConfig",
    "CONFIG_FILENAME",
    "DEFAULT_BRANCH",
    "DEFAULT_REMOTE",
    "find_config_path",
    "load_config",
    "resolve_config",
]

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".super.toml"
USER_CONFIG_FILENAME = "config.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"
DEFAULT_SCAN_DEPTH = 2
DEFAULT_NAME_WIDTH = 16
DEFAULT_STATUS_WIDTH = 10


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Settings for ``super pull``.

    Attributes:
        remote: Remote that is fetched from and fast-forwarded against.
        default_branch: Branch tracked by submodules with no ``branch`` entry.
    """

    remote: str = DEFAULT_REMOTE
    default_branch: str = DEFAULT_BRANCH


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Settings for repository discovery outside a git work tree."""

    max_depth: int = DEFAULT_SCAN_DEPTH


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Column widths of the status report."""

    name_width: int = DEFAULT_NAME_WIDTH
    status_width: int = DEFAULT_STATUS_WIDTH


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    sync: SyncConfig = field(default_factory=SyncConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a numeric setting is out of range.
        """
        sync: StrDict = get_table(data, "sync") or {}
        scan: StrDict = get_table(data, "scan") or {}
        output: StrDict = get_table(data, "output") or {}

        max_depth = get_int(scan, "max_depth")
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"scan.max_depth must be at least 1, got {max_depth}")

        name_width = get_int(output, "name_width")
        status_width = get_int(output, "status_width")
        for key, width in (("name_width", name_width), ("status_width", status_width)):
            if width is not None and width < 1:
                raise ValueError(f"output.{key} must be at least 1, got {width}")

        return cls(
            sync=SyncConfig(
                remote=get_str(sync, "remote") or DEFAULT_REMOTE,
                default_branch=get_str(sync, "default_branch") or DEFAULT_BRANCH,
            ),
            scan=ScanConfig(
                max_depth=max_depth if max_depth is not None else DEFAULT_SCAN_DEPTH,
            ),
            output=OutputConfig(
                name_width=name_width or DEFAULT_NAME_WIDTH,
                status_width=status_width or DEFAULT_STATUS_WIDTH,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, turning I/O and syntax problems into ConfigError."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

    logger.debug("loaded config from %s", path)
    return Ok(config)


def find_config_path(cwd: Path) -> Path | None:
    """Locate the config file that applies to ``cwd``.

    Checks ``<cwd>/.super.toml`` first, then the user-level
    ``<config dir>/config.toml``. Returns None when neither exists.
    """
    candidates = (cwd / CONFIG_FILENAME, user_config_dir() / USER_CONFIG_FILENAME)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def resolve_config(cwd: Path, explicit: Path | None = None) -> Result[Config, ConfigError]:
    """Load the effective configuration for a command run in ``cwd``.

    An explicitly given path must exist. Otherwise the first file found by
    find_config_path() is used, and the defaults apply when there is none.
    """
    if explicit is not None:
        return load_config(explicit)

    path = find_config_path(cwd)
    if path is None:
        logger.debug("no config file found, using defaults")
        return Ok(Config())
    return load_config(path)
