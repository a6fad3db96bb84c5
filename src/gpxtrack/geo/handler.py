from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Callable
from xml.sax.handler import ContentHandler

from gpxtrack.geo.point import ALTITUDE_UNSET, Point

logger = logging.getLogger(__name__)

TRKPT = "trkpt"
ELE = "ele"
TIME = "time"


class MissingAttributeError(ValueError):
    pass


class _State(enum.Enum):
    OUTSIDE = "outside"
    IN_TRKPT = "trkpt"
    IN_ELE = "ele"
    IN_TIME = "time"


def _attribute(attrs, element: str, name: str) -> str:
    if attrs is None:
        attrs = {}
    elif not isinstance(attrs, Mapping) and not hasattr(attrs, "get"):
        attrs = dict(attrs)
    value = attrs.get(name)
    if value is None:
        raise MissingAttributeError(
            f"<{element}> is missing required attribute '{name}'."
        )
    return value


def _parse_float(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid {name} value: {value!r}") from None


class TrkPtHandler(ContentHandler):
    """
    SAX content handler that assembles one Point per <trkpt> element.

    Only <trkpt> and its <ele> and <time> children are interpreted. Each
    completed point is passed to handle_point() when its <trkpt> closes;
    by default that forwards to the on_point callable given at construction,
    or does nothing when none was given.

    Args:
        on_point: Optional consumer called once per delivered Point.
    """

    def __init__(self, on_point: Callable[[Point], None] | None = None):
        super().__init__()
        self._on_point = on_point
        self.reset()

    def reset(self) -> None:
        """Drops any partially parsed <trkpt> so the handler can be reused."""
        self._state = _State.OUTSIDE
        self._latitude = 0.0
        self._longitude = 0.0
        self._altitude = ALTITUDE_UNSET
        self._timestamp = ""
        self._text: list[str] = []

    def startDocument(self) -> None:
        self.reset()

    @property
    def in_trkpt(self) -> bool:
        return self._state is not _State.OUTSIDE

    def handle_point(self, point: Point) -> None:
        if self._on_point is not None:
            self._on_point(point)

    def startElement(self, name: str, attrs) -> None:
        if name == TRKPT:
            if self._state is not _State.OUTSIDE:
                logger.warning(
                    "Discarding unfinished <trkpt> at %s, %s",
                    self._latitude,
                    self._longitude,
                )
            latitude = _parse_float(_attribute(attrs, name, "lat"), "lat")
            longitude = _parse_float(_attribute(attrs, name, "lon"), "lon")
            self.reset()
            self._latitude = latitude
            self._longitude = longitude
            self._state = _State.IN_TRKPT
        elif self._state is _State.OUTSIDE:
            return
        elif name == ELE:
            self._text = []
            self._state = _State.IN_ELE
        elif name == TIME:
            self._text = []
            self._state = _State.IN_TIME

    def characters(self, content: str) -> None:
        if self._state is _State.IN_ELE or self._state is _State.IN_TIME:
            self._text.append(content)

    def endElement(self, name: str) -> None:
        if name == ELE:
            if self._state is _State.IN_ELE:
                self._altitude = _parse_float("".join(self._text), ELE)
                self._text = []
                self._state = _State.IN_TRKPT
        elif name == TIME:
            if self._state is _State.IN_TIME:
                self._timestamp = "".join(self._text)
                self._text = []
                self._state = _State.IN_TRKPT
        elif name == TRKPT:
            if self._state is _State.OUTSIDE:
                logger.debug("Ignoring </trkpt> without an open <trkpt>")
                return
            point = Point(
                latitude=self._latitude,
                longitude=self._longitude,
                altitude=self._altitude,
                timestamp=self._timestamp,
            )
            self.reset()
            self.handle_point(point)
