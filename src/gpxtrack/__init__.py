from .geo import (
    ALTITUDE_UNSET,
    GpxParseError,
    MissingAttributeError,
    Point,
    TrkPtHandler,
    load_gpx,
    parse_gpx,
)

__version__ = "0.1.0"

__all__ = [
    "ALTITUDE_UNSET",
    "GpxParseError",
    "load_gpx",
    "MissingAttributeError",
    "parse_gpx",
    "Point",
    "TrkPtHandler",
]
