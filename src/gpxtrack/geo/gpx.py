from __future__ import annotations

import logging
import os
import xml.sax
from pathlib import Path
from typing import IO, Callable, Iterator, Union
from xml.sax.handler import feature_external_ges, feature_namespaces

from gpxtrack.geo.handler import TrkPtHandler
from gpxtrack.geo.point import Point

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

GpxSource = Union[str, bytes, os.PathLike, IO[bytes]]


class GpxParseError(ValueError):
    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ):
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Invalid GPX XML{location}: {message}")
        self.line = line
        self.column = column


def _read_chunks(handle: IO[bytes], chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = handle.read(chunk_size)
        if not chunk:
            return
        yield chunk


def _iter_chunks(source: GpxSource, chunk_size: int) -> Iterator[str | bytes]:
    if isinstance(source, (str, bytes)):
        for start in range(0, len(source), chunk_size):
            yield source[start : start + chunk_size]
    elif isinstance(source, os.PathLike):
        with Path(source).open("rb") as handle:
            yield from _read_chunks(handle, chunk_size)
    else:
        yield from _read_chunks(source, chunk_size)


def _make_reader(handler: TrkPtHandler):
    reader = xml.sax.make_parser()
    reader.setFeature(feature_namespaces, False)
    reader.setFeature(feature_external_ges, False)
    reader.setContentHandler(handler)
    return reader


def parse_gpx(
    source: GpxSource,
    handler: TrkPtHandler,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_progress: Callable[[int], None] | None = None,
) -> TrkPtHandler:
    """
    Streams a GPX document through the SAX tokenizer into handler.

    Args:
        source: A GPX document as str or bytes, a filesystem path, or a
            binary file object.
        handler: Receives the element and character events.
        chunk_size: Number of bytes (characters for str input) fed per step.
        on_progress: Called with the size of every chunk after it is fed.
    Returns:
        The handler, for chaining.
    Raises:
        GpxParseError: The tokenizer rejected the document.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be greater than 0.")

    reader = _make_reader(handler)
    fed = False
    try:
        for chunk in _iter_chunks(source, chunk_size):
            reader.feed(chunk)
            fed = True
            if on_progress is not None:
                on_progress(len(chunk))
        if not fed:
            # The reader skips close() entirely when it was never fed.
            reader.feed(b"")
        reader.close()
    except xml.sax.SAXParseException as exc:
        raise GpxParseError(
            exc.getMessage(), exc.getLineNumber(), exc.getColumnNumber()
        ) from exc
    return handler


def load_gpx(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[Point]:
    points: list[Point] = []
    parse_gpx(Path(path), TrkPtHandler(points.append), chunk_size=chunk_size)
    logger.debug("Loaded %s track points from %s", len(points), path)
    return points
