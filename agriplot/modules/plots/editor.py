"""
Interactive farm-plot editing session.

An EditSession owns the ring under edit and its history. Taps, drags and
deletes come in as candidate coordinates and every call returns an
EditResult instead of raising, so UI handlers can show the right feedback.

States: EMPTY (0 vertices) -> BUILDING (1-2) -> COMPLETE (3+). Deleting a
vertex from a 3-vertex ring drops back to BUILDING.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

from agriplot.modules.plots.coordinates import (
    Coordinate,
    Ring,
    ring_area,
    validate_coordinate,
)
from agriplot.modules.plots.geometry import (
    distance_meters,
    nearest_edge_of_ring,
    point_in_polygon,
    rings_overlap,
)
from agriplot.modules.plots.history import RingHistory
from agriplot.modules.plots.snapping import push_out_of_ring, resolve_candidate

logger = logging.getLogger(__name__)

TAP_TOLERANCE_METERS = 10.0


class SessionState(str, Enum):
    EMPTY = "EMPTY"
    BUILDING = "BUILDING"
    COMPLETE = "COMPLETE"


class EditOutcome(str, Enum):
    APPENDED = "APPENDED"
    INSERTED = "INSERTED"
    MOVED = "MOVED"
    DRAGGING = "DRAGGING"
    DELETED = "DELETED"
    SELECTED = "SELECTED"  # tap landed on an existing vertex
    CONFLICT = "CONFLICT"  # candidate falls inside a sibling plot
    INVALID = "INVALID"  # unusable coordinate or index
    NO_CHANGE = "NO_CHANGE"


@dataclass(frozen=True)
class SiblingPlot:
    """Another farm plot already saved in the same area."""
    plot_id: str
    ring: Ring
    soil_type: str = ""


@dataclass
class EditResult:
    outcome: EditOutcome
    index: Optional[int] = None
    vertex: Optional[Coordinate] = None
    sibling: Optional[SiblingPlot] = None
    message: str = ""


@dataclass
class EditSession:
    boundary: Ring = ()
    siblings: Sequence[SiblingPlot] = ()
    initial: Ring = ()
    tap_tolerance_meters: float = TAP_TOLERANCE_METERS
    strict_overlap: bool = False
    history: RingHistory = field(init=False)
    _drag_origin: Optional[Ring] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.boundary = tuple(self.boundary)
        self.siblings = tuple(self.siblings)
        self.history = RingHistory(self.initial)

    # --- Derived state ---

    @property
    def vertices(self) -> Ring:
        return self.history.current

    @property
    def vertex_count(self) -> int:
        return len(self.history.current)

    @property
    def is_complete(self) -> bool:
        return self.vertex_count >= 3

    @property
    def state(self) -> SessionState:
        if self.vertex_count == 0:
            return SessionState.EMPTY
        if self.vertex_count < 3:
            return SessionState.BUILDING
        return SessionState.COMPLETE

    @property
    def hectares(self) -> str:
        return ring_area(self.vertices)

    @property
    def is_dragging(self) -> bool:
        return self._drag_origin is not None

    # --- Checks ---

    def _conflicting_sibling(self, candidate: Coordinate) -> Optional[SiblingPlot]:
        for sibling in self.siblings:
            if rings_overlap((candidate,), sibling.ring, strict=self.strict_overlap):
                return sibling
        return None

    def _vertex_near(self, candidate: Coordinate) -> Optional[int]:
        nearest_index, nearest_dist = None, None
        for i, vertex in enumerate(self.vertices):
            dist = distance_meters(candidate, vertex)
            if dist <= self.tap_tolerance_meters and (nearest_dist is None or dist < nearest_dist):
                nearest_index, nearest_dist = i, dist
        return nearest_index

    def _valid_index(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < self.vertex_count

    def _cancel_drag(self) -> None:
        if self._drag_origin is not None:
            self.history.replace_current(self._drag_origin)
            self._drag_origin = None

    # --- Mutations ---

    def add_or_insert_vertex(self, candidate: Any) -> EditResult:
        """
        Handle a map tap.

        The candidate is snapped into the boundary, rejected if it lands in
        a sibling plot, treated as a selection if it is within the tap
        tolerance of an existing vertex, and otherwise appended (fewer than
        2 vertices) or inserted into the nearest edge.
        """
        coord = validate_coordinate(candidate)
        if coord is None:
            return EditResult(EditOutcome.INVALID, message="Invalid coordinate.")

        self._cancel_drag()
        coord = resolve_candidate(coord, self.boundary)

        sibling = self._conflicting_sibling(coord)
        if sibling is not None:
            logger.info(f"Rejected vertex {coord}: overlaps plot {sibling.plot_id}")
            return EditResult(
                EditOutcome.CONFLICT,
                vertex=coord,
                sibling=sibling,
                message=f"This overlaps with an existing farm plot ({sibling.soil_type or 'Unknown'}).",
            )

        near = self._vertex_near(coord)
        if near is not None:
            return EditResult(EditOutcome.SELECTED, index=near, vertex=self.vertices[near])

        prior = self.vertices
        if len(prior) < 2:
            self.history.push(prior, prior + (coord,))
            return EditResult(EditOutcome.APPENDED, index=len(prior), vertex=coord)

        hit = nearest_edge_of_ring(coord, prior)
        if hit is None:
            self.history.push(prior, prior + (coord,))
            return EditResult(EditOutcome.APPENDED, index=len(prior), vertex=coord)

        position = hit.edge_index + 1
        self.history.push(prior, prior[:position] + (coord,) + prior[position:])
        return EditResult(EditOutcome.INSERTED, index=position, vertex=coord)

    def move_vertex(self, index: int, candidate: Any, dragging: bool = False) -> EditResult:
        """
        Move a vertex.

        While ``dragging`` the vertex follows the finger without any history
        entry. The final call (``dragging=False``) snaps the point into the
        boundary, pushes it out of any sibling plot it landed in, and records
        one undoable move from the pre-drag ring.
        """
        if not self._valid_index(index):
            return EditResult(EditOutcome.INVALID, index=index, message="No vertex at this index.")
        coord = validate_coordinate(candidate)
        if coord is None:
            return EditResult(EditOutcome.INVALID, index=index, message="Invalid coordinate.")

        prior = self._drag_origin if self._drag_origin is not None else self.vertices

        if dragging:
            if self._drag_origin is None:
                self._drag_origin = self.vertices
            live = self.vertices
            self.history.replace_current(live[:index] + (coord,) + live[index + 1:])
            return EditResult(EditOutcome.DRAGGING, index=index, vertex=coord)

        self._drag_origin = None
        final = resolve_candidate(coord, self.boundary)
        for sibling in self.siblings:
            if point_in_polygon(final, sibling.ring):
                final = push_out_of_ring(final, sibling.ring, self.boundary)
        moved = prior[:index] + (final,) + prior[index + 1:]
        if moved == prior:
            self.history.replace_current(prior)
            return EditResult(EditOutcome.NO_CHANGE, index=index, vertex=final)

        self.history.push(prior, moved)
        return EditResult(EditOutcome.MOVED, index=index, vertex=final)

    def delete_vertex(self, index: int) -> EditResult:
        """Remove a vertex. The caller is responsible for asking the user first."""
        self._cancel_drag()
        if not self._valid_index(index):
            return EditResult(EditOutcome.INVALID, index=index, message="No vertex at this index.")

        prior = self.vertices
        removed = prior[index]
        self.history.push(prior, prior[:index] + prior[index + 1:])

        message = ""
        if not self.is_complete and len(prior) >= 3:
            message = "The farm plot must have at least 3 points."
            logger.info(f"Farm shape incomplete after delete ({self.vertex_count} points)")
        return EditResult(EditOutcome.DELETED, index=index, vertex=removed, message=message)

    def undo(self) -> bool:
        """Step back one mutation. Abandons a drag in progress."""
        self._cancel_drag()
        return self.history.undo()

    def redo(self) -> bool:
        self._cancel_drag()
        return self.history.redo()
