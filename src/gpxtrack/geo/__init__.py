from .export import CSV_FIELDS, render_table, write_csv, write_json
from .gpx import DEFAULT_CHUNK_SIZE, GpxParseError, load_gpx, parse_gpx
from .handler import MissingAttributeError, TrkPtHandler
from .point import ALTITUDE_UNSET, Point

__all__ = [
    "ALTITUDE_UNSET",
    "CSV_FIELDS",
    "DEFAULT_CHUNK_SIZE",
    "GpxParseError",
    "load_gpx",
    "MissingAttributeError",
    "parse_gpx",
    "Point",
    "render_table",
    "TrkPtHandler",
    "write_csv",
    "write_json",
]
