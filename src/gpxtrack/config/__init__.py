from .settings import (
    OUTPUT_FORMATS,
    AppConfig,
    load_app_config,
    parse_output_format,
    parse_size,
    resolve_config_path,
    save_app_config,
)

__all__ = [
    "AppConfig",
    "load_app_config",
    "OUTPUT_FORMATS",
    "parse_output_format",
    "parse_size",
    "resolve_config_path",
    "save_app_config",
]
