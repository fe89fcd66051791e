"""
Pre-submit checks for a finished farm plot.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from agriplot.modules.plots.coordinates import Ring
from agriplot.modules.plots.editor import SiblingPlot
from agriplot.modules.plots.geometry import is_simple_ring, point_in_polygon, rings_overlap

logger = logging.getLogger(__name__)


class FailureReason(str, Enum):
    TOO_FEW_VERTICES = "TOO_FEW_VERTICES"
    OUTSIDE_BOUNDARY = "OUTSIDE_BOUNDARY"
    OVERLAPS_SIBLING = "OVERLAPS_SIBLING"
    SELF_INTERSECTING = "SELF_INTERSECTING"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    vertex_index: Optional[int] = None
    sibling_id: Optional[str] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)


def is_submittable(
    ring: Ring,
    boundary: Ring,
    siblings: Sequence[SiblingPlot] = (),
    strict: bool = False,
) -> ValidationResult:
    """
    Check a plot before it is sent to the backend.

    Rules are evaluated in order and the first broken one is returned:
    at least 3 vertices, every vertex inside the area boundary, no overlap
    with a sibling plot, no self-intersection. The boundary rule is skipped
    when the boundary itself has fewer than 3 vertices.
    """
    logger.debug(f"Validating plot with {len(ring)} points against {len(siblings)} sibling plots")
    if len(ring) < 3:
        return ValidationResult(
            ok=False,
            reason=FailureReason.TOO_FEW_VERTICES,
            message="Cannot save with fewer than 3 points.",
        )

    if len(boundary) >= 3:
        for i, vertex in enumerate(ring):
            if not point_in_polygon(vertex, boundary):
                return ValidationResult(
                    ok=False,
                    reason=FailureReason.OUTSIDE_BOUNDARY,
                    message=(
                        "The farm plot boundary exceeds the land claim area. Please adjust "
                        "the markers so the entire farm stays within the land claim area."
                    ),
                    vertex_index=i,
                )

    for sibling in siblings:
        if rings_overlap(ring, sibling.ring, strict=strict):
            return ValidationResult(
                ok=False,
                reason=FailureReason.OVERLAPS_SIBLING,
                message=f"This overlaps with an existing farm plot ({sibling.soil_type or 'Unknown'}).",
                sibling_id=sibling.plot_id,
            )

    if not is_simple_ring(ring):
        return ValidationResult(
            ok=False,
            reason=FailureReason.SELF_INTERSECTING,
            message="The farm plot outline crosses itself.",
        )

    return ValidationResult.success()
