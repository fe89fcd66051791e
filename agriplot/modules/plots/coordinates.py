"""
Coordinate and ring value types for the farm-plot editor.

A ring is an ordered, implicitly closed tuple of coordinates. The closing
vertex is never stored twice.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6371008.8
SQUARE_METERS_PER_HECTARE = 10000.0


@dataclass(frozen=True)
class Coordinate:
    """A geographic point in decimal degrees."""
    latitude: float
    longitude: float

    def as_lng_lat(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)


Ring = Tuple[Coordinate, ...]


def _to_float(value: Any) -> Optional[float]:
    # bools are ints in Python; a True latitude is never intended
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def validate_coordinate(raw: Any) -> Optional[Coordinate]:
    """
    Coerce a raw coordinate into a Coordinate.

    Accepts a Coordinate, a mapping with ``latitude``/``longitude`` keys
    (or the backend's ``Latitude``/``Longitude``), or a ``(lat, lng)`` pair.
    Values may be numbers or numeric strings.

    Returns:
        Coordinate, or None when either component is missing or not finite
    """
    if isinstance(raw, Coordinate):
        lat_raw, lng_raw = raw.latitude, raw.longitude
    elif isinstance(raw, dict):
        lat_raw = raw.get("latitude", raw.get("Latitude"))
        lng_raw = raw.get("longitude", raw.get("Longitude"))
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        lat_raw, lng_raw = raw
    else:
        logger.warning(f"Unrecognised coordinate shape: {raw!r}")
        return None

    lat = _to_float(lat_raw)
    lng = _to_float(lng_raw)
    if lat is None or lng is None:
        logger.warning(f"Invalid coordinate values dropped: lat={lat_raw!r}, lng={lng_raw!r}")
        return None

    return Coordinate(latitude=lat, longitude=lng)


def coerce_ring(raw_points: Iterable[Any]) -> Ring:
    """Validate every point, dropping the ones that are not usable."""
    ring = []
    for raw in raw_points or []:
        coord = validate_coordinate(raw)
        if coord is not None:
            ring.append(coord)
    return tuple(ring)


def project_to_meters(ring: Ring, reference_latitude: Optional[float] = None) -> np.ndarray:
    """
    Equirectangular projection of a ring to local planar meters.

    Returns an (n, 2) array of (x, y). The longitude scale is taken at
    ``reference_latitude`` (defaults to the ring's mean latitude).
    """
    lats = np.radians(np.array([c.latitude for c in ring], dtype=float))
    lngs = np.radians(np.array([c.longitude for c in ring], dtype=float))
    if reference_latitude is None:
        # fsum keeps the reference independent of vertex order
        ref = math.fsum(lats.tolist()) / len(ring) if len(ring) else 0.0
    else:
        ref = math.radians(reference_latitude)
    x = EARTH_RADIUS_METERS * lngs * math.cos(ref)
    y = EARTH_RADIUS_METERS * lats
    return np.column_stack([x, y])


def ring_area_square_meters(ring: Ring) -> float:
    """Absolute shoelace area of the projected ring. 0.0 for incomplete rings."""
    if len(ring) < 3:
        return 0.0
    xy = project_to_meters(ring)
    x, y = xy[:, 0], xy[:, 1]
    cross_terms = x * np.roll(y, -1) - y * np.roll(x, -1)
    twice_area = math.fsum(cross_terms.tolist())
    return abs(twice_area) / 2.0


def ring_area(ring: Ring) -> str:
    """
    Area of a ring in hectares, formatted with 2 decimals.

    Rings with fewer than 3 vertices have no area and return "0.00".
    """
    if len(ring) < 3:
        return "0.00"
    hectares = ring_area_square_meters(ring) / SQUARE_METERS_PER_HECTARE
    return f"{hectares:.2f}"
