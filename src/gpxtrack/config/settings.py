from __future__ import annotations

import configparser
import io
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from gpxtrack.geo.gpx import DEFAULT_CHUNK_SIZE

OUTPUT_FORMATS = ("csv", "json", "table")

DEFAULT_OUTPUT_FORMAT = "csv"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AppConfig:
    output_format: str
    chunk_size: int
    show_progress: bool


def _default_config_dir() -> Path:
    if os.name == "nt":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "gpxtrack"


def resolve_config_path(explicit: Path | None = None) -> Path:
    if explicit is not None:
        return explicit.expanduser()
    env_path = os.getenv("GPXTRACK_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return _default_config_dir() / "config.ini"


def parse_size(value: str | None, default: int) -> int:
    if not value:
        return default
    text = value.strip().lower()
    if not text:
        return default
    if text.isdigit():
        return max(0, int(text))
    units = {"kb": 1024, "mb": 1024**2, "gb": 1024**3, "tb": 1024**4}
    for suffix, multiplier in units.items():
        if text.endswith(suffix):
            number = text[: -len(suffix)].strip()
            if not number:
                raise ValueError("Missing size value.")
            return max(0, int(float(number) * multiplier))
    raise ValueError(f"Unrecognized size '{value}'. Use bytes or KB/MB/GB/TB.")


def parse_output_format(value: str) -> str:
    lowered = value.strip().lower()
    if lowered not in OUTPUT_FORMATS:
        raise ValueError(f"Output format must be one of {', '.join(OUTPUT_FORMATS)}.")
    return lowered


def _parse_chunk_size(value: str | None, default: int) -> int:
    size = parse_size(value, default)
    if size <= 0:
        raise ValueError("chunk_size must be greater than 0.")
    return size


def _parse_bool(value: str | None, name: str, default: bool) -> bool:
    if value is None:
        return default
    text = value.strip().lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name}: {value!r}")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def load_app_config(
    config_path: Path | None = None, include_env: bool = True
) -> AppConfig:
    path = resolve_config_path(config_path)
    parser = configparser.ConfigParser()
    if path.is_file():
        parser.read(path)
    section = parser["default"] if parser.has_section("default") else {}

    output_format = parse_output_format(
        _clean(section.get("output_format")) or DEFAULT_OUTPUT_FORMAT
    )
    chunk_size = _parse_chunk_size(section.get("chunk_size"), DEFAULT_CHUNK_SIZE)
    show_progress = _parse_bool(section.get("show_progress"), "show_progress", True)

    if include_env:
        format_env = _clean(os.getenv("GPXTRACK_FORMAT"))
        if format_env:
            output_format = parse_output_format(format_env)
        chunk_size = _parse_chunk_size(os.getenv("GPXTRACK_CHUNK_SIZE"), chunk_size)
        show_progress = _parse_bool(
            os.getenv("GPXTRACK_PROGRESS"), "GPXTRACK_PROGRESS", show_progress
        )

    return AppConfig(
        output_format=output_format,
        chunk_size=chunk_size,
        show_progress=show_progress,
    )


def save_app_config(config: AppConfig, config_path: Path | None = None) -> Path:
    path = resolve_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    parser = configparser.ConfigParser()
    parser["default"] = {
        "output_format": config.output_format,
        "chunk_size": str(config.chunk_size),
        "show_progress": "true" if config.show_progress else "false",
    }
    buffer = io.StringIO()
    parser.write(buffer)
    path.write_text(buffer.getvalue(), encoding="utf-8")
    return path
