"""
Pydantic schemas for offline submissions.
"""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field


class OfflineSubmission(BaseModel):
    """A farm-plot submission that could not reach the backend."""
    id: str = Field(..., description="farm_<epoch-ms>_<payload hash>")
    type: Literal["area", "farm"] = "farm"
    endpoint: str = Field(..., examples=["/area/12/farm"])
    method: Literal["POST", "PUT"]
    payload: Dict[str, Any]
    timestamp: int = Field(..., description="Epoch milliseconds of the failed attempt")
    retries: int = 0
    status: Literal["pending", "failed", "syncing"] = "pending"
    error_message: Optional[str] = None
