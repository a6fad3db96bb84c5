from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def trkpts_gpx() -> Path:
    """Real-world style track with 143 points, a waypoint and metadata."""
    return DATA_DIR / "trkpts.gpx"
