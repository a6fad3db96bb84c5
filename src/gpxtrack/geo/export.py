from __future__ import annotations

import csv
import json
from dataclasses import asdict
from typing import IO, Iterable

from rich.table import Table

from gpxtrack.geo.point import Point

CSV_FIELDS = ("latitude", "longitude", "altitude", "timestamp")


def write_csv(points: Iterable[Point], handle: IO[str]) -> int:
    writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    count = 0
    for point in points:
        writer.writerow(asdict(point))
        count += 1
    return count


def write_json(points: Iterable[Point], handle: IO[str]) -> int:
    payload = [asdict(point) for point in points]
    json.dump(payload, handle, indent=2)
    handle.write("\n")
    return len(payload)


def render_table(points: Iterable[Point], title: str | None = None) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    table.add_column("Altitude (m)", justify="right")
    table.add_column("Time")
    for idx, point in enumerate(points):
        table.add_row(
            str(idx),
            repr(point.latitude),
            repr(point.longitude),
            repr(point.altitude),
            point.timestamp,
        )
    return table
