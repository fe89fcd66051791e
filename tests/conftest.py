import pytest

from agriplot.config import settings
from agriplot.modules.plots.coordinates import Coordinate
from agriplot.modules.plots.editor import SiblingPlot


def ring_of(*points):
    """Build a ring from (lat, lng) pairs."""
    return tuple(Coordinate(latitude=lat, longitude=lng) for lat, lng in points)


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    path = tmp_path / "test_db.json"
    monkeypatch.setattr(settings, "DB_FILE", str(path))
    return path


@pytest.fixture
def boundary():
    # roughly 2.2 km square around the equator/prime meridian
    return ring_of((-0.01, -0.01), (-0.01, 0.01), (0.01, 0.01), (0.01, -0.01))


@pytest.fixture
def sibling():
    return SiblingPlot(
        plot_id="7",
        ring=ring_of((0.005, 0.005), (0.005, 0.008), (0.008, 0.008), (0.008, 0.005)),
        soil_type="Loam",
    )


@pytest.fixture
def triangle():
    return ring_of((0.0, 0.0), (0.0, 0.004), (0.004, 0.004))
