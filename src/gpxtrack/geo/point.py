from __future__ import annotations

from dataclasses import dataclass

ALTITUDE_UNSET = 0.0


@dataclass(frozen=True)
class Point:
    latitude: float
    longitude: float
    altitude: float = ALTITUDE_UNSET
    timestamp: str = ""
