"""
Plot editing sessions: ties the editor core to the backend and the offline queue.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from fastapi import HTTPException

from agriplot.config import settings
from agriplot.database import JsonDatabase
from agriplot.modules.offline.services import OfflineQueue, build_offline_submission
from agriplot.modules.plots import schemas
from agriplot.modules.plots.editor import EditResult, EditSession, SiblingPlot
from agriplot.modules.plots.geometry import ring_to_geojson
from agriplot.modules.plots.validation import ValidationResult, is_submittable
from agriplot.modules.upstream.client import (
    UpstreamClient,
    UpstreamError,
    is_network_error,
    submission_endpoint,
)

logger = logging.getLogger(__name__)


@dataclass
class ManagedSession:
    session_id: str
    area_id: str
    farm_id: Optional[str]
    editor: EditSession
    soil_type: str = ""
    soil_suitability: str = ""
    last_touched: float = field(default=0.0, repr=False)


class SessionStore:
    """
    In-process registry of open editing sessions.

    Sessions not read or written for ``idle_timeout`` seconds are evicted
    on the next ``add`` or ``get``, so abandoned edits do not pile up.
    """

    def __init__(self, idle_timeout: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.idle_timeout = settings.SESSION_IDLE_TIMEOUT_SECONDS if idle_timeout is None else idle_timeout
        self.clock = clock
        self._sessions: Dict[str, ManagedSession] = {}

    def _evict_idle(self, now: float) -> None:
        expired = [
            sid for sid, s in self._sessions.items()
            if now - s.last_touched > self.idle_timeout
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Evicted {len(expired)} idle plot session(s)")

    def add(self, session: ManagedSession) -> ManagedSession:
        now = self.clock()
        self._evict_idle(now)
        session.last_touched = now
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[ManagedSession]:
        now = self.clock()
        self._evict_idle(now)
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_touched = now
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None


# Singleton instance
_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get or create session store singleton."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def session_response(session: ManagedSession) -> schemas.SessionResponse:
    editor = session.editor
    return schemas.SessionResponse(
        session_id=session.session_id,
        area_id=session.area_id,
        farm_id=session.farm_id,
        vertices=schemas.ring_out(editor.vertices),
        hectares=editor.hectares,
        is_complete=editor.is_complete,
        state=editor.state.value,
        can_undo=editor.history.can_undo,
        can_redo=editor.history.can_redo,
        is_dragging=editor.is_dragging,
        soil_type=session.soil_type,
        soil_suitability=session.soil_suitability,
        geojson=ring_to_geojson(editor.vertices) if editor.is_complete else None,
    )


def edit_response(session: ManagedSession, result: EditResult) -> schemas.EditResponse:
    return schemas.EditResponse(
        outcome=result.outcome.value,
        index=result.index,
        vertex=schemas.CoordinateOut.from_coordinate(result.vertex) if result.vertex else None,
        conflict_plot_id=result.sibling.plot_id if result.sibling else None,
        message=result.message,
        session=session_response(session),
    )


def validation_response(result: ValidationResult) -> schemas.ValidationResponse:
    return schemas.ValidationResponse(
        ok=result.ok,
        reason=result.reason.value if result.reason else None,
        message=result.message,
        vertex_index=result.vertex_index,
        sibling_id=result.sibling_id,
    )


class PlotSessionService:
    def __init__(self, store: SessionStore, upstream: UpstreamClient, db: JsonDatabase):
        self.store = store
        self.upstream = upstream
        self.db = db

    def get_session(self, session_id: str) -> ManagedSession:
        session = self.store.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Editing session not found")
        return session

    async def open_session(self, request: schemas.SessionCreate, token: str) -> ManagedSession:
        # 1. Boundary and sibling plots come from the backend once per session
        try:
            area = await self.upstream.get_area(request.area_id, token)
        except UpstreamError as e:
            if is_network_error(e):
                raise HTTPException(status_code=503, detail="Land-claim backend is unreachable")
            raise HTTPException(status_code=e.status_code or 502, detail=e.message)

        # 2. Resuming an edit starts from the saved ring
        initial = ()
        soil_type = soil_suitability = ""
        if request.farm_id is not None:
            farm = area.find_farm(request.farm_id)
            if farm is None:
                raise HTTPException(status_code=404, detail="Farm plot not found in this area")
            initial = farm.ring
            soil_type, soil_suitability = farm.soil_type, farm.soil_suitability

        siblings = [
            SiblingPlot(plot_id=f.farm_id, ring=f.ring, soil_type=f.soil_type)
            for f in area.farms
            if f.farm_id != str(request.farm_id) and f.ring
        ]

        editor = EditSession(
            boundary=area.boundary,
            siblings=siblings,
            initial=initial,
            tap_tolerance_meters=settings.TAP_TOLERANCE_METERS,
            strict_overlap=settings.STRICT_OVERLAP,
        )
        session = ManagedSession(
            session_id=str(uuid.uuid4()),
            area_id=request.area_id,
            farm_id=request.farm_id,
            editor=editor,
            soil_type=soil_type,
            soil_suitability=soil_suitability,
        )
        logger.info(
            f"Opened plot session {session.session_id} for area {request.area_id} "
            f"({len(initial)} points, {len(siblings)} sibling plots)"
        )
        return self.store.add(session)

    def validate(self, session: ManagedSession) -> ValidationResult:
        editor = session.editor
        return is_submittable(
            editor.vertices,
            editor.boundary,
            editor.siblings,
            strict=editor.strict_overlap,
        )

    async def commit(
        self, session: ManagedSession, request: schemas.CommitRequest, token: str
    ) -> schemas.CommitResponse:
        editor = session.editor
        if editor.is_dragging:
            raise HTTPException(status_code=409, detail="Finish moving the marker before saving")

        # 1. Geometry rules first: nothing leaves the device with < 3 points
        result = self.validate(session)
        if not result.ok:
            raise HTTPException(status_code=422, detail=validation_response(result).model_dump())

        # 2. Farm data
        soil_type = request.soil_type or session.soil_type
        soil_suitability = request.soil_suitability or session.soil_suitability
        if not soil_type:
            raise HTTPException(status_code=422, detail="Please select a soil type.")
        if not soil_suitability:
            raise HTTPException(status_code=422, detail="Please select soil suitability.")

        payload = schemas.FarmPlotPayload(
            coordinates=schemas.ring_out(editor.vertices),
            soil_type=soil_type,
            soil_suitability=soil_suitability,
            hectares=editor.hectares,
        )
        farm_data = payload.to_backend()

        # 3. Submit, falling back to the offline queue when there is no connection
        try:
            await self.upstream.submit_plot(session.area_id, farm_data, token, farm_id=session.farm_id)
        except UpstreamError as e:
            if not is_network_error(e):
                raise HTTPException(status_code=e.status_code or 502, detail=e.message)

            submission = build_offline_submission(
                endpoint=submission_endpoint(session.area_id, session.farm_id),
                method="PUT" if session.farm_id else "POST",
                payload=farm_data,
                error_message=e.message,
            )
            OfflineQueue(self.db).save(submission)
            self.store.discard(session.session_id)
            return schemas.CommitResponse(
                status="queued",
                offline_submission_id=submission.id,
                message=(
                    "You are currently offline. Your farm plot data has been saved locally "
                    "and will be submitted automatically when your connection is restored."
                ),
                payload=payload,
            )

        self.store.discard(session.session_id)
        action = "updated" if session.farm_id else "created"
        logger.info(f"Farm plot {action} for area {session.area_id} ({payload.hectares} ha)")
        return schemas.CommitResponse(
            status="submitted",
            message=f"Farm plot {action} successfully!",
            payload=payload,
        )
