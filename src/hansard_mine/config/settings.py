"""Application configuration helpers for the Hansard engine."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, TypeVar, get_type_hints


_DEFAULT_CONFIG_LOCATIONS = (
    Path("hansard_mine.json"),
    Path.home() / ".config" / "hansard_mine" / "config.json",
)

ENV_PREFIX = "HANSARD_"


@dataclass(slots=True)
class ParserConfig:
    """Thresholds used while segmenting and parsing a transcript."""

    min_block_length: int = 50
    section_window: int = 10000
    attendance_window: int = 20000
    expected_seats: int = 222
    context_chars: int = 160
    max_question_chars: int = 2000
    max_answer_chars: int = 5000
    max_raw_chars: int = 3000


@dataclass(slots=True)
class ResolverConfig:
    """Settings for speaker resolution and suggestion ranking."""

    suggestion_limit: int = 5
    min_name_length: int = 3


@dataclass(slots=True)
class StorageConfig:
    """Configuration for the local SQLite database."""

    database_url: str = "sqlite:///hansard_mine.db"
    echo_sql: bool = False


@dataclass(slots=True)
class AppConfig:
    """High level application configuration."""

    parser: ParserConfig
    resolver: ResolverConfig
    storage: StorageConfig


_SECTIONS: Dict[str, Type[Any]] = {
    "parser": ParserConfig,
    "resolver": ResolverConfig,
    "storage": StorageConfig,
}

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
    raise ValueError(f"Cannot convert {value!r} to bool")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to int")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Cannot convert {value!r} to int")
    return int(value)


_COERCERS: Dict[Any, Callable[[Any], Any]] = {bool: _to_bool, int: _to_int, str: str}

T = TypeVar("T")


def _load_from_env(section: str) -> Dict[str, Any]:
    """Entries named ``HANSARD_<SECTION>_<FIELD>``, keyed by lower-case field name."""

    prefix = f"{ENV_PREFIX}{section.upper()}_"
    return {key.removeprefix(prefix).lower(): value for key, value in os.environ.items() if key.startswith(prefix)}


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf8") as fh:
        return json.load(fh)


def _dataclass_from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """Create dataclass ``cls`` from ``data``, converting each value to the field type.

    Keys that are not fields of ``cls`` are ignored.
    """

    kwargs: Dict[str, Any] = {}
    type_hints = get_type_hints(cls)
    for field in fields(cls):
        if data.get(field.name) is None:
            continue
        coerce = _COERCERS[type_hints[field.name]]
        try:
            kwargs[field.name] = coerce(data[field.name])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {cls.__name__}.{field.name}: {data[field.name]!r}") from exc
    return cls(**kwargs)


def resolve_config_path(explicit_path: Optional[Path] = None) -> Path:
    """Return the effective configuration file path.

    If ``explicit_path`` is provided it is returned verbatim. Otherwise the
    first existing default location is used, falling back to
    ``~/.config/hansard_mine/config.json``.
    """

    if explicit_path:
        return explicit_path

    for candidate in _DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return _DEFAULT_CONFIG_LOCATIONS[-1]


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Create the application configuration.

    Defaults are overlaid with the optional JSON file and then with
    environment variables named ``HANSARD_SECTION_FIELD`` (for example
    ``HANSARD_PARSER_MIN_BLOCK_LENGTH``).
    """

    file_data: Dict[str, Any] = {}
    if explicit_path:
        file_data = _load_config_file(explicit_path)
    else:
        for candidate in _DEFAULT_CONFIG_LOCATIONS:
            file_data = _load_config_file(candidate)
            if file_data:
                break

    sections = {}
    for name, cls in _SECTIONS.items():
        data = {**file_data.get(name, {}), **_load_from_env(name)}
        sections[name] = _dataclass_from_dict(cls, data)
    return AppConfig(**sections)


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    """Persist ``config`` as JSON and return the target path."""

    target = resolve_config_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    data = {name: asdict(getattr(config, name)) for name in _SECTIONS}
    with target.open("w", encoding="utf8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
        fh.write("\n")
    return target


__all__ = [
    "AppConfig",
    "ParserConfig",
    "ResolverConfig",
    "StorageConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
