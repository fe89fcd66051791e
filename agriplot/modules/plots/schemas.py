from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

from agriplot.modules.plots.coordinates import Coordinate, Ring

# --- 1. Coordinate Models ---

class CoordinateIn(BaseModel):
    """
    A tapped or dragged map position.

    Values that are not finite are accepted here and rejected by the editor,
    which answers with an INVALID outcome instead of a 422.
    """
    latitude: float = Field(..., examples=[14.5995])
    longitude: float = Field(..., examples=[120.9842])

class CoordinateOut(BaseModel):
    latitude: float
    longitude: float

    @classmethod
    def from_coordinate(cls, coord: Coordinate) -> "CoordinateOut":
        return cls(latitude=coord.latitude, longitude=coord.longitude)

def ring_out(ring: Ring) -> List[CoordinateOut]:
    return [CoordinateOut.from_coordinate(c) for c in ring]

class VertexMove(CoordinateIn):
    dragging: bool = Field(False, description="True for live drag frames, False on drag end")

# --- 2. Session Models ---

class SessionCreate(BaseModel):
    area_id: str = Field(..., examples=["12"])
    farm_id: Optional[str] = Field(None, description="Resume editing a saved farm plot")

class SessionResponse(BaseModel):
    session_id: str
    area_id: str
    farm_id: Optional[str] = None
    vertices: List[CoordinateOut]
    hectares: str
    is_complete: bool
    state: Literal["EMPTY", "BUILDING", "COMPLETE"]
    can_undo: bool
    can_redo: bool
    is_dragging: bool = False
    soil_type: str = ""
    soil_suitability: str = ""
    geojson: Optional[dict] = Field(None, description="Closed GeoJSON Polygon once the plot is complete")

class EditResponse(BaseModel):
    outcome: str
    index: Optional[int] = None
    vertex: Optional[CoordinateOut] = None
    conflict_plot_id: Optional[str] = None
    message: str = ""
    session: SessionResponse

class ValidationResponse(BaseModel):
    ok: bool
    reason: Optional[str] = None
    message: str = ""
    vertex_index: Optional[int] = None
    sibling_id: Optional[str] = None

# --- 3. Commit Models ---

class CommitRequest(BaseModel):
    soil_type: str = ""
    soil_suitability: str = ""

class FarmPlotPayload(BaseModel):
    """The committed plot, as handed to the backend's create/update call."""
    model_config = ConfigDict(populate_by_name=True)

    coordinates: List[CoordinateOut]
    soil_type: str = Field(..., alias="soilType")
    soil_suitability: str = Field(..., alias="soilSuitability")
    hectares: str
    status: str = "Inactive"

    def to_backend(self) -> dict:
        """Field names used by the land-claim backend."""
        return {
            "coordinates": [c.model_dump() for c in self.coordinates],
            "Soil_Type": self.soil_type,
            "Soil_Suitability": self.soil_suitability,
            "Hectares": self.hectares,
            "Status": self.status,
        }

class CommitResponse(BaseModel):
    status: Literal["submitted", "queued"]
    offline_submission_id: Optional[str] = None
    message: str
    payload: FarmPlotPayload
