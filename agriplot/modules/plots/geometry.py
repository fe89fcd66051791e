"""
Geometric primitives used by the plot editor.

All functions are pure. Rings are treated as implicitly closed: the edge
from the last vertex back to the first always exists.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from shapely.geometry import LinearRing, Polygon, mapping

from agriplot.modules.plots.coordinates import (
    EARTH_RADIUS_METERS,
    Coordinate,
    Ring,
    project_to_meters,
)

logger = logging.getLogger(__name__)

# Points closer than this (in degrees) to an edge count as on the edge.
# About 0.1 mm on the ground, well below GPS precision.
EDGE_EPSILON_DEGREES = 1e-9


@dataclass(frozen=True)
class EdgeHit:
    """Nearest edge of a ring to a point."""
    edge_index: int  # edge runs from ring[edge_index] to ring[(edge_index + 1) % n]
    projected: Coordinate
    distance_meters: float


def _is_finite(coord: Coordinate) -> bool:
    return math.isfinite(coord.latitude) and math.isfinite(coord.longitude)


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance between two points in meters."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))


def _project_onto_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> Tuple[float, float]:
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return ax, ay
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return ax + t * dx, ay + t * dy


def _on_segment(point: Coordinate, a: Coordinate, b: Coordinate) -> bool:
    px, py = point.longitude, point.latitude
    qx, qy = _project_onto_segment(px, py, a.longitude, a.latitude, b.longitude, b.latitude)
    return math.hypot(px - qx, py - qy) <= EDGE_EPSILON_DEGREES


def point_in_polygon(point: Coordinate, ring: Ring) -> bool:
    """
    Even-odd ray casting test.

    Points lying on an edge count as inside, so a point snapped onto the
    boundary is accepted by the containment checks. Rings with fewer than
    3 vertices have no interior and always return False.
    """
    n = len(ring)
    if n < 3 or not _is_finite(point):
        return False

    x, y = point.longitude, point.latitude
    inside = False
    for i in range(n):
        a = ring[i]
        b = ring[(i + 1) % n]
        if _on_segment(point, a, b):
            return True
        ax, ay = a.longitude, a.latitude
        bx, by = b.longitude, b.latitude
        if (ay > y) != (by > y):
            x_cross = ax + (y - ay) * (bx - ax) / (by - ay)
            if x < x_cross:
                inside = not inside
    return inside


def nearest_point_on_segment(
    point: Coordinate, segment_start: Coordinate, segment_end: Coordinate
) -> Tuple[Coordinate, float]:
    """
    Project a point onto a segment.

    The projection is done in a local equirectangular frame scaled at the
    point's latitude, which is accurate at sub-kilometer scale.

    Returns:
        (projected point, distance in meters from point to projection)
    """
    scale = max(math.cos(math.radians(point.latitude)), 1e-12)
    qx, qy = _project_onto_segment(
        point.longitude * scale, point.latitude,
        segment_start.longitude * scale, segment_start.latitude,
        segment_end.longitude * scale, segment_end.latitude,
    )
    projected = Coordinate(latitude=qy, longitude=qx / scale)
    return projected, distance_meters(point, projected)


def nearest_edge_of_ring(point: Coordinate, ring: Ring) -> Optional[EdgeHit]:
    """
    Find the ring edge closest to a point, including the closing edge.

    Returns None when the ring has fewer than 2 vertices or every edge has
    a non-finite endpoint.
    """
    n = len(ring)
    if n < 2:
        return None

    best: Optional[EdgeHit] = None
    # a 2-vertex ring has a single edge; its closing edge is the same segment
    edge_count = 1 if n == 2 else n
    for i in range(edge_count):
        a = ring[i]
        b = ring[(i + 1) % n]
        if not (_is_finite(a) and _is_finite(b)):
            continue
        projected, dist = nearest_point_on_segment(point, a, b)
        if not math.isfinite(dist):
            continue
        if best is None or dist < best.distance_meters:
            best = EdgeHit(edge_index=i, projected=projected, distance_meters=dist)
    return best


def _edges_cross(ring_a: Ring, ring_b: Ring) -> bool:
    if len(ring_a) < 3 or len(ring_b) < 3:
        return False
    line_a = LinearRing([c.as_lng_lat() for c in ring_a])
    line_b = LinearRing([c.as_lng_lat() for c in ring_b])
    return line_a.crosses(line_b)


def rings_overlap(ring_a: Ring, ring_b: Ring, strict: bool = False) -> bool:
    """
    True if any vertex of one ring lies inside the other.

    This is a vertex-containment heuristic: two polygons whose edges cross
    without either one holding a vertex of the other (a thin "X") are not
    detected. ``strict=True`` adds an edge-crossing test for that case.
    """
    if any(point_in_polygon(v, ring_b) for v in ring_a):
        return True
    if any(point_in_polygon(v, ring_a) for v in ring_b):
        return True
    if strict:
        return _edges_cross(ring_a, ring_b)
    return False


def signed_area(ring: Ring) -> float:
    """Shoelace area in square meters; positive for counter-clockwise rings."""
    if len(ring) < 3:
        return 0.0
    xy = project_to_meters(ring)
    x, y = xy[:, 0], xy[:, 1]
    return float(np.sum(x * np.roll(y, -1) - y * np.roll(x, -1))) / 2.0


def is_simple_ring(ring: Ring) -> bool:
    """True when the closed ring has at least 3 vertices and no self-intersections."""
    if len(ring) < 3:
        return False
    return LinearRing([c.as_lng_lat() for c in ring]).is_simple


def ring_to_geojson(ring: Ring) -> dict:
    """GeoJSON Polygon for a complete ring, in [lng, lat] order and closed."""
    if len(ring) < 3:
        raise ValueError("A polygon needs at least 3 vertices.")
    geojson = mapping(Polygon([c.as_lng_lat() for c in ring]))
    return {
        "type": geojson["type"],
        "coordinates": [[list(pos) for pos in outer] for outer in geojson["coordinates"]],
    }
