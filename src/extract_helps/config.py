"""Configuration loader for extract-helps runs."""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from .core import config as core_config
from .extract import DEFAULT_SECTION
from .render import DEFAULT_WIDTH

CONFIG_FILENAME = "extract_helps.toml"
CONFIG_ENV = "EXTRACT_HELPS_CONFIG"
ENV_PREFIX = "EXTRACT_HELPS_"

_DEFAULT_LOG_LEVEL = "WARNING"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ExtractHelpsConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class ExtractHelpsConfig:
    """Fully resolved configuration for an extraction run."""

    width: int = DEFAULT_WIDTH
    section: str = DEFAULT_SECTION
    strict_duplicates: bool = False
    format_command: Optional[str] = None
    log_level: str = _DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    width: Optional[int] = None
    section: Optional[str] = None
    strict_duplicates: Optional[bool] = None
    format_command: Optional[str] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved configuration and the file it came from, if any."""

    config: ExtractHelpsConfig
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env
    default_path = (cwd or Path.cwd()) / CONFIG_FILENAME

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=default_path,
    )
    explicit = config_path is not None or _has_env_config(env_map)

    file_options = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        try:
            parsed = core_config.load_toml(requested_path)
            core_config.merge_defaults(file_options, parsed)
        except core_config.TomlConfigError as exc:
            raise ExtractHelpsConfigError(str(exc)) from exc
    elif explicit:
        raise ExtractHelpsConfigError(
            f"Config file not found: {requested_path}"
        )

    width = _resolve_width(
        _pick_first(
            overrides.width,
            _parse_env_string(env_map, "WIDTH"),
            file_options["render"]["width"],
        )
    )
    section = _resolve_string(
        "extract.section",
        _pick_first(
            overrides.section,
            _parse_env_string(env_map, "SECTION"),
            file_options["extract"]["section"],
        ),
    )
    strict_duplicates = _resolve_bool(
        "extract.strict_duplicates",
        _pick_first(
            overrides.strict_duplicates,
            _parse_env_string(env_map, "STRICT"),
            file_options["extract"]["strict_duplicates"],
        ),
    )
    format_command = _resolve_format_command(
        _pick_first(
            overrides.format_command,
            _parse_env_string(env_map, "FORMAT_COMMAND"),
            file_options["output"]["format_command"],
        ),
    )
    log_level = _resolve_log_level(
        _resolve_string(
            "logging.level",
            _pick_first(
                overrides.log_level,
                _parse_env_string(env_map, "LOG_LEVEL"),
                file_options["logging"]["level"],
            ),
        )
    )
    log_dir_value = _resolve_optional_string(
        "logging.dir",
        _pick_first(
            _parse_env_string(env_map, "LOG_DIR"),
            file_options["logging"]["dir"],
        ),
    )
    log_dir = Path(log_dir_value).expanduser() if log_dir_value else None

    config = ExtractHelpsConfig(
        width=width,
        section=section,
        strict_duplicates=strict_duplicates,
        format_command=format_command,
        log_level=log_level,
        log_dir=log_dir,
    )
    return LoadResult(config=config, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "render": {"width": DEFAULT_WIDTH},
        "extract": {
            "section": DEFAULT_SECTION,
            "strict_duplicates": False,
        },
        "output": {"format_command": ""},
        "logging": {"level": _DEFAULT_LOG_LEVEL, "dir": ""},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = env_map.get(CONFIG_ENV)
    if env_candidate and env_candidate.strip():
        return Path(env_candidate.strip()).expanduser()
    return default_path


def _has_env_config(env_map: Mapping[str, str]) -> bool:
    env_candidate = env_map.get(CONFIG_ENV)
    return bool(env_candidate and env_candidate.strip())


def _resolve_width(value: object) -> int:
    if isinstance(value, bool):
        raise ExtractHelpsConfigError("render.width must be an integer.")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as exc:
            raise ExtractHelpsConfigError(
                f"render.width must be an integer, got '{value}'."
            ) from exc
    if not isinstance(value, int):
        raise ExtractHelpsConfigError("render.width must be an integer.")
    if value < 1:
        raise ExtractHelpsConfigError("render.width must be positive.")
    return value


def _resolve_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ExtractHelpsConfigError(f"{key} must be a boolean.")


def _resolve_string(key: str, value: object) -> str:
    if not isinstance(value, str):
        raise ExtractHelpsConfigError(f"{key} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ExtractHelpsConfigError(f"{key} must be a non-empty string.")
    return stripped


def _resolve_optional_string(key: str, value: object) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ExtractHelpsConfigError(f"{key} must be a string.")
    return value.strip() or None


def _resolve_format_command(value: object) -> Optional[str]:
    command = _resolve_optional_string("output.format_command", value)
    if command is None:
        return None
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise ExtractHelpsConfigError(
            f"output.format_command is not a valid command line: {exc}."
        ) from exc
    if not argv or not argv[0]:
        raise ExtractHelpsConfigError(
            "output.format_command must name an executable."
        )
    return command


def _resolve_log_level(value: str) -> str:
    level = value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ExtractHelpsConfigError(
            f"logging.level must be a logging level name, got '{value}'."
        )
    return level


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
