"""
Shapes returned by the land-claim backend, after coordinate coercion.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from agriplot.modules.plots.coordinates import Ring


@dataclass
class FarmRecord:
    """A farm plot saved under an area."""
    farm_id: str
    soil_type: str
    soil_suitability: str
    hectares: str
    status: str
    ring: Ring


@dataclass
class AreaSnapshot:
    """Land-claim area with its boundary and the farms inside it."""
    area_id: str
    name: str
    boundary: Ring
    farms: List[FarmRecord] = field(default_factory=list)

    def find_farm(self, farm_id: Optional[str]) -> Optional[FarmRecord]:
        if farm_id is None:
            return None
        return next((f for f in self.farms if f.farm_id == str(farm_id)), None)
