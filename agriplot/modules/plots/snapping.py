"""
Boundary snapping: keeps candidate points inside the area boundary and
out of sibling plots.
"""

import logging
import math

from agriplot.modules.plots.coordinates import Coordinate, Ring
from agriplot.modules.plots.geometry import nearest_edge_of_ring, point_in_polygon

logger = logging.getLogger(__name__)

# How far past a sibling edge a pushed-out point lands, in degrees (about 1 cm).
SIBLING_CLEARANCE_DEGREES = 1e-7


def resolve_candidate(raw_point: Coordinate, boundary: Ring) -> Coordinate:
    """
    Clamp a candidate point to the area boundary.

    Points inside the boundary (or any point, when the boundary has fewer
    than 3 vertices) are returned unchanged. Points outside are projected
    onto the nearest boundary edge. If no edge is usable the point is kept
    as-is and a warning is logged.
    """
    if len(boundary) < 3:
        return raw_point

    if point_in_polygon(raw_point, boundary):
        return raw_point

    hit = nearest_edge_of_ring(raw_point, boundary)
    if hit is None:
        logger.warning(f"Could not snap to boundary. Using original coordinate: {raw_point}")
        return raw_point

    logger.debug(
        f"Snapped {raw_point} to boundary edge {hit.edge_index} "
        f"({hit.distance_meters:.1f} m)"
    )
    return hit.projected


def _offset(point: Coordinate, dx: float, dy: float) -> Coordinate:
    return Coordinate(latitude=point.latitude + dy, longitude=point.longitude + dx)


def push_out_of_ring(raw_point: Coordinate, ring: Ring, boundary: Ring = ()) -> Coordinate:
    """
    Move a point that fell inside ``ring`` to just outside its nearest edge.

    The point is projected onto the nearest edge and then stepped
    ``SIBLING_CLEARANCE_DEGREES`` further out, so on-edge containment checks
    no longer see it inside. The outward step follows the direction from the
    point to its projection and falls back to the edge normals. A step that
    would leave ``boundary`` is not taken, and if no step works the on-edge
    projection is returned.
    """
    if not point_in_polygon(raw_point, ring):
        return raw_point

    hit = nearest_edge_of_ring(raw_point, ring)
    if hit is None:
        logger.warning(f"Could not snap out of sibling plot. Using original coordinate: {raw_point}")
        return raw_point

    projected = hit.projected
    a = ring[hit.edge_index]
    b = ring[(hit.edge_index + 1) % len(ring)]

    directions = []
    dx = projected.longitude - raw_point.longitude
    dy = projected.latitude - raw_point.latitude
    if math.hypot(dx, dy) > 0:
        directions.append((dx, dy))
    ex, ey = b.longitude - a.longitude, b.latitude - a.latitude
    if math.hypot(ex, ey) > 0:
        directions.extend([(-ey, ex), (ey, -ex)])

    for dx, dy in directions:
        length = math.hypot(dx, dy)
        step = SIBLING_CLEARANCE_DEGREES / length
        candidate = _offset(projected, dx * step, dy * step)
        if point_in_polygon(candidate, ring):
            continue
        if len(boundary) >= 3 and not point_in_polygon(candidate, boundary):
            continue
        logger.debug(f"Pushed {raw_point} out of sibling plot across edge {hit.edge_index}")
        return candidate

    return projected
