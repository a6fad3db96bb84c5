"""
Unit tests for TrkPtHandler

Tests drive the handler with hand-written SAX events, the same calls the
expat reader makes while tokenizing a document:
1. <trkpt> coordinates and defaults
2. <ele> and <time> buffering
3. Ignored elements and stray character data
4. Error handling for bad attributes and elevation text
"""

import logging

import pytest

from gpxtrack.geo.handler import MissingAttributeError, TrkPtHandler
from gpxtrack.geo.point import ALTITUDE_UNSET, Point

TRKPT_ATTRS = {"lat": "-123.456", "lon": "37.37"}


@pytest.fixture
def points():
    return []


@pytest.fixture
def handler(points):
    return TrkPtHandler(points.append)


class CollectingHandler(TrkPtHandler):
    def __init__(self):
        super().__init__()
        self.points = []

    def handle_point(self, point):
        self.points.append(point)


# ============================================================================
# Default callback
# ============================================================================


def test_default_callback_is_noop():
    handler = TrkPtHandler()
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("10")
    handler.endElement("ele")
    handler.endElement("trkpt")
    assert not handler.in_trkpt


def test_subclass_can_override_handle_point():
    handler = CollectingHandler()
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.endElement("trkpt")
    assert handler.points == [Point(-123.456, 37.37)]


# ============================================================================
# <trkpt>
# ============================================================================


def test_trkpt_without_children_uses_defaults(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.endElement("trkpt")

    assert len(points) == 1
    point = points[0]
    assert point.latitude == -123.456
    assert point.longitude == 37.37
    assert point.altitude == ALTITUDE_UNSET
    assert point.timestamp == ""


@pytest.mark.parametrize(
    "attrs",
    [
        {"lat": "-123.456", "lon": "37.37"},
        [("lat", "-123.456"), ("lon", "37.37")],
        [("lon", "37.37"), ("lat", "-123.456")],
    ],
)
def test_trkpt_accepts_mapping_or_pairs(handler, points, attrs):
    handler.startElement("trkpt", attrs)
    handler.endElement("trkpt")
    assert points == [Point(-123.456, 37.37)]


def test_one_point_per_trkpt_in_order(handler, points):
    for lat in ("1.5", "2.5", "3.5"):
        handler.startElement("trkpt", {"lat": lat, "lon": "0"})
        handler.endElement("trkpt")
    assert [p.latitude for p in points] == [1.5, 2.5, 3.5]


def test_state_resets_between_trkpts(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("100.5")
    handler.endElement("ele")
    handler.startElement("time", None)
    handler.characters("2008-10-03T11:10:01Z")
    handler.endElement("time")
    handler.endElement("trkpt")

    handler.startElement("trkpt", {"lat": "1", "lon": "2"})
    handler.endElement("trkpt")

    assert points[1] == Point(1.0, 2.0, ALTITUDE_UNSET, "")


def test_unmatched_trkpt_end_is_ignored(handler, points):
    handler.endElement("trkpt")
    assert points == []
    assert not handler.in_trkpt


def test_reopened_trkpt_discards_unfinished_point(handler, points, caplog):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("55")
    handler.endElement("ele")
    with caplog.at_level(logging.WARNING, logger="gpxtrack.geo.handler"):
        handler.startElement("trkpt", {"lat": "1", "lon": "2"})
    handler.endElement("trkpt")

    assert points == [Point(1.0, 2.0)]
    assert "Discarding unfinished <trkpt>" in caplog.text


# ============================================================================
# <ele> and <time>
# ============================================================================


def test_ele(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("12356.789")
    handler.endElement("ele")
    handler.endElement("trkpt")

    assert len(points) == 1
    assert points[0].latitude == -123.456
    assert points[0].longitude == 37.37
    assert points[0].altitude == 12356.789
    assert points[0].timestamp == ""


def test_time_is_kept_verbatim(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("time", None)
    handler.characters("2008-10-03T11:10:01Z")
    handler.endElement("time")
    handler.endElement("trkpt")

    assert len(points) == 1
    assert points[0].timestamp == "2008-10-03T11:10:01Z"
    assert points[0].altitude == ALTITUDE_UNSET


def test_split_character_data_is_concatenated(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    for piece in ("123", "56.", "789"):
        handler.characters(piece)
    handler.endElement("ele")
    handler.startElement("time", None)
    for piece in ("2008-10-03", "T11:10", ":01Z"):
        handler.characters(piece)
    handler.endElement("time")
    handler.endElement("trkpt")

    assert points[0].altitude == 12356.789
    assert points[0].timestamp == "2008-10-03T11:10:01Z"


def test_reentered_ele_resets_buffer(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("1")
    handler.endElement("ele")
    handler.startElement("ele", None)
    handler.characters("2")
    handler.endElement("ele")
    handler.endElement("trkpt")

    assert points[0].altitude == 2.0


def test_reentered_time_resets_buffer(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("time", None)
    handler.characters("stale")
    handler.startElement("time", None)
    handler.characters("2008-10-03T11:10:01Z")
    handler.endElement("time")
    handler.endElement("trkpt")

    assert points[0].timestamp == "2008-10-03T11:10:01Z"


# ============================================================================
# Ignored input
# ============================================================================


def test_ele_and_time_outside_trkpt_are_ignored(handler, points):
    handler.startElement("wpt", {"lat": "5", "lon": "6"})
    handler.startElement("ele", None)
    handler.characters("999")
    handler.endElement("ele")
    handler.startElement("time", None)
    handler.characters("2001-01-01T00:00:00Z")
    handler.endElement("time")
    handler.endElement("wpt")

    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.endElement("trkpt")

    assert points == [Point(-123.456, 37.37)]


def test_character_data_outside_sub_elements_is_ignored(handler, points):
    handler.characters("\n  ")
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.characters("\n    junk")
    handler.startElement("ele", None)
    handler.characters("10.5")
    handler.endElement("ele")
    handler.characters("\n    ")
    handler.startElement("time", None)
    handler.characters("2008-10-03T11:10:01Z")
    handler.endElement("time")
    handler.characters("\n  ")
    handler.endElement("trkpt")
    handler.characters("trailing")

    assert points == [Point(-123.456, 37.37, 10.5, "2008-10-03T11:10:01Z")]


def test_unrelated_nested_elements_keep_context(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("extensions", None)
    handler.startElement("hr", None)
    handler.characters("142")
    handler.endElement("hr")
    handler.endElement("extensions")
    handler.startElement("sat", None)
    handler.characters("8")
    handler.endElement("sat")
    handler.startElement("ele", None)
    handler.characters("7")
    handler.endElement("ele")
    handler.endElement("trkpt")

    assert points == [Point(-123.456, 37.37, 7.0, "")]


def test_unmatched_ele_end_is_ignored(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.endElement("ele")
    handler.endElement("time")
    handler.endElement("trkpt")
    assert points == [Point(-123.456, 37.37)]


# ============================================================================
# Errors
# ============================================================================


@pytest.mark.parametrize(
    "attrs, missing",
    [
        ({"lon": "37.37"}, "lat"),
        ({"lat": "-123.456"}, "lon"),
        (None, "lat"),
    ],
)
def test_missing_coordinate_attribute(handler, attrs, missing):
    with pytest.raises(MissingAttributeError, match=f"'{missing}'"):
        handler.startElement("trkpt", attrs)
    assert not handler.in_trkpt


def test_non_numeric_coordinate(handler):
    with pytest.raises(ValueError, match="Invalid lat value"):
        handler.startElement("trkpt", {"lat": "north", "lon": "1"})


@pytest.mark.parametrize("text", ["abc", "", "12,5"])
def test_malformed_elevation_raises(handler, points, text):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters(text)
    with pytest.raises(ValueError, match="Invalid ele value"):
        handler.endElement("ele")
    assert points == []


def test_reset_drops_open_context(handler, points):
    handler.startElement("trkpt", TRKPT_ATTRS)
    handler.startElement("ele", None)
    handler.characters("1")
    handler.reset()
    handler.endElement("ele")
    handler.endElement("trkpt")

    assert points == []
    assert not handler.in_trkpt
