from fastapi import APIRouter, Depends, HTTPException
from typing import List

from agriplot.database import get_db, JsonDatabase
from . import schemas, services

router = APIRouter(prefix="/offline-submissions", tags=["Offline Submissions"])

@router.get("/", response_model=List[schemas.OfflineSubmission])
def list_pending_submissions(db: JsonDatabase = Depends(get_db)):
    """Submissions waiting for connectivity (pending or failed)."""
    return services.OfflineQueue(db).get_pending()

@router.delete("/{submission_id}", status_code=204)
def discard_submission(submission_id: str, db: JsonDatabase = Depends(get_db)):
    if not services.OfflineQueue(db).remove(submission_id):
        raise HTTPException(status_code=404, detail="Submission not found")

@router.delete("/", status_code=204)
def clear_submissions(db: JsonDatabase = Depends(get_db)):
    services.OfflineQueue(db).clear()
