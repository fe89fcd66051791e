from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer

from agriplot.database import get_db, JsonDatabase
from agriplot.modules.upstream.client import UpstreamClient, get_upstream_client
from . import schemas, services

router = APIRouter(prefix="/plot-sessions", tags=["Farm Plot Editor"])
# The token is issued by the land-claim backend and forwarded unchanged
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def get_plot_service(
    store: services.SessionStore = Depends(services.get_session_store),
    upstream: UpstreamClient = Depends(get_upstream_client),
    db: JsonDatabase = Depends(get_db),
) -> services.PlotSessionService:
    return services.PlotSessionService(store, upstream, db)


@router.post("/", response_model=schemas.SessionResponse, status_code=201)
async def open_session(
    request: schemas.SessionCreate,
    token: str = Depends(oauth2_scheme),
    service: services.PlotSessionService = Depends(get_plot_service),
):
    """
    Enter edit mode for a new plot, or for a saved one when `farm_id` is given.
    """
    session = await service.open_session(request, token)
    return services.session_response(session)


@router.get("/{session_id}", response_model=schemas.SessionResponse)
def get_session(session_id: str, service: services.PlotSessionService = Depends(get_plot_service)):
    return services.session_response(service.get_session(session_id))


@router.post("/{session_id}/vertices", response_model=schemas.EditResponse)
def tap(
    session_id: str,
    point: schemas.CoordinateIn,
    service: services.PlotSessionService = Depends(get_plot_service),
):
    """
    Map tap: adds a marker, inserts it into the nearest edge, or selects an
    existing marker. Conflicts with other plots come back as `CONFLICT`.
    """
    session = service.get_session(session_id)
    result = session.editor.add_or_insert_vertex(point.model_dump())
    return services.edit_response(session, result)


@router.put("/{session_id}/vertices/{index}", response_model=schemas.EditResponse)
def move_vertex(
    session_id: str,
    index: int,
    move: schemas.VertexMove,
    service: services.PlotSessionService = Depends(get_plot_service),
):
    session = service.get_session(session_id)
    candidate = {"latitude": move.latitude, "longitude": move.longitude}
    result = session.editor.move_vertex(index, candidate, dragging=move.dragging)
    return services.edit_response(session, result)


@router.delete("/{session_id}/vertices/{index}", response_model=schemas.EditResponse)
def delete_vertex(
    session_id: str,
    index: int,
    service: services.PlotSessionService = Depends(get_plot_service),
):
    session = service.get_session(session_id)
    result = session.editor.delete_vertex(index)
    return services.edit_response(session, result)


@router.post("/{session_id}/undo", response_model=schemas.SessionResponse)
def undo(session_id: str, service: services.PlotSessionService = Depends(get_plot_service)):
    session = service.get_session(session_id)
    session.editor.undo()
    return services.session_response(session)


@router.post("/{session_id}/redo", response_model=schemas.SessionResponse)
def redo(session_id: str, service: services.PlotSessionService = Depends(get_plot_service)):
    session = service.get_session(session_id)
    session.editor.redo()
    return services.session_response(session)


@router.get("/{session_id}/validation", response_model=schemas.ValidationResponse)
def validate(session_id: str, service: services.PlotSessionService = Depends(get_plot_service)):
    session = service.get_session(session_id)
    return services.validation_response(service.validate(session))


@router.post("/{session_id}/commit", response_model=schemas.CommitResponse)
async def commit(
    session_id: str,
    request: schemas.CommitRequest,
    token: str = Depends(oauth2_scheme),
    service: services.PlotSessionService = Depends(get_plot_service),
):
    """
    Validate and save the plot. When the backend is unreachable the plot is
    queued for later submission and `status` is `queued`.
    """
    session = service.get_session(session_id)
    return await service.commit(session, request, token)


@router.delete("/{session_id}", status_code=204)
def cancel(session_id: str, service: services.PlotSessionService = Depends(get_plot_service)):
    """Leave edit mode without saving."""
    service.get_session(session_id)
    service.store.discard(session_id)
