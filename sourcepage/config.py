"""Configuration loading for sourcepage (.sourcepage.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .fsio import DEFAULT_MAX_CONCURRENCY
from .naming import DEFAULT_SEPARATOR
from .navigation import DEFAULT_QUEUE_NAME
from .render.markdown_renderer import DEFAULT_EXTENSIONS

CONFIG_FILENAME = ".sourcepage.yml"

DEFAULT_DATA_DIR = "public/data"
DEFAULT_INIT_SCRIPT = "public/js/sp-init.js"

COLLISION_SKIP = "skip"
COLLISION_ERROR = "error"
_COLLISION_POLICIES = {COLLISION_SKIP, COLLISION_ERROR}

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """Where artifacts and the initialization script are written."""

    data_dir: Path
    init_script: Path
    queue_name: str = DEFAULT_QUEUE_NAME


@dataclass
class WalkConfig:
    """Directory traversal settings."""

    prune_dirs: List[str] = field(default_factory=list)
    follow_symlinks: bool = False


@dataclass
class NamingConfig:
    """Artifact naming settings."""

    separator: str = DEFAULT_SEPARATOR
    collisions: str = COLLISION_SKIP


@dataclass
class SourcePageConfig:
    """Represents the settings defined in .sourcepage.yml."""

    root: Path
    output: OutputConfig
    walk: WalkConfig = field(default_factory=WalkConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    languages: Dict[str, str] = field(default_factory=dict)
    markdown_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY


def default_config(root: Path) -> SourcePageConfig:
    root = root.expanduser().resolve()
    return SourcePageConfig(
        root=root,
        output=OutputConfig(
            data_dir=root / DEFAULT_DATA_DIR,
            init_script=root / DEFAULT_INIT_SCRIPT,
        ),
    )


def load_config(config_path: Path) -> SourcePageConfig:
    """Load configuration for a project directory or an explicit config file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = default_config(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_data = _as_dict(data.get("output"))
    data_dir = _as_str(output_data.get("data_dir"))
    if data_dir:
        config.output.data_dir = (root / data_dir).resolve()
    init_script = _as_str(output_data.get("init_script"))
    if init_script:
        config.output.init_script = (root / init_script).resolve()
    queue_name = _as_str(output_data.get("queue_name"))
    if queue_name is not None:
        if not _JS_IDENTIFIER.match(queue_name):
            raise ConfigError(f"output.queue_name must be a JavaScript identifier: {queue_name!r}")
        config.output.queue_name = queue_name

    walk_data = _as_dict(data.get("walk"))
    config.walk.prune_dirs = _as_str_list(walk_data.get("prune_dirs"))
    follow = _as_bool(walk_data.get("follow_symlinks"))
    if follow is not None:
        config.walk.follow_symlinks = follow

    naming_data = _as_dict(data.get("naming"))
    separator = _as_str(naming_data.get("separator"))
    if separator is not None:
        if not separator or "/" in separator or "\\" in separator:
            raise ConfigError("naming.separator must be non-empty and free of path separators")
        config.naming.separator = separator
    collisions = _as_str(naming_data.get("collisions"))
    if collisions is not None:
        collisions = collisions.lower()
        if collisions not in _COLLISION_POLICIES:
            raise ConfigError(
                f"naming.collisions must be one of {sorted(_COLLISION_POLICIES)}, got {collisions!r}"
            )
        config.naming.collisions = collisions

    languages = _as_dict(data.get("languages"))
    config.languages = {
        str(suffix): str(language)
        for suffix, language in languages.items()
        if _as_str(language)
    }

    markdown_data = _as_dict(data.get("markdown"))
    if "extensions" in markdown_data:
        config.markdown_extensions = _as_str_list(markdown_data.get("extensions"))

    concurrency_data = _as_dict(data.get("concurrency"))
    if "max_open_files" in concurrency_data:
        max_open = _as_int(concurrency_data.get("max_open_files"))
        if max_open is None or max_open < 1:
            raise ConfigError("concurrency.max_open_files must be a positive integer")
        config.max_concurrency = max_open

    check_output_paths(config)
    return config


def check_output_paths(config: SourcePageConfig) -> None:
    """Reject an output directory that contains the project root."""
    data_dir = config.output.data_dir.expanduser().resolve()
    root = config.root.expanduser().resolve()
    if data_dir == root or data_dir in root.parents:
        raise ConfigError(
            f"Output directory {data_dir} contains the project root {root}; "
            "generated artifacts would be scanned again on the next run"
        )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.name == CONFIG_FILENAME and not config_path.is_dir():
        return config_path.resolve()
    return (config_path / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "COLLISION_ERROR",
    "COLLISION_SKIP",
    "CONFIG_FILENAME",
    "ConfigError",
    "NamingConfig",
    "OutputConfig",
    "SourcePageConfig",
    "WalkConfig",
    "check_output_paths",
    "default_config",
    "load_config",
]
