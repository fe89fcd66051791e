"""
Offline submission queue backed by the local JSON database.

Only saving and listing live here; replaying the queue against the
backend is done by the sync worker on the device.
"""

import hashlib
import json
import logging
import time
from typing import List, Optional

from agriplot.database import JsonDatabase
from agriplot.modules.offline.schemas import OfflineSubmission

logger = logging.getLogger(__name__)


def payload_hash(payload: dict) -> str:
    """First 9 hex digits of the SHA-1 of the canonical JSON payload."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:9]


def build_offline_submission(
    endpoint: str,
    method: str,
    payload: dict,
    error_message: Optional[str] = None,
    submission_type: str = "farm",
    timestamp_ms: Optional[int] = None,
) -> OfflineSubmission:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return OfflineSubmission(
        id=f"{submission_type}_{timestamp_ms}_{payload_hash(payload)}",
        type=submission_type,
        endpoint=endpoint,
        method=method,
        payload=payload,
        timestamp=timestamp_ms,
        error_message=error_message,
    )


class OfflineQueue:
    def __init__(self, db: JsonDatabase):
        self.db = db

    def save(self, submission: OfflineSubmission) -> OfflineSubmission:
        existing_ids = {s["id"] for s in self.db.get_offline_submissions()}
        if submission.id in existing_ids:
            logger.info(f"[OfflineSubmission] Already queued: {submission.id}")
            return submission
        self.db.add_offline_submission(submission.model_dump())
        logger.info(f"[OfflineSubmission] Saved submission: {submission.id}")
        return submission

    def get_pending(self) -> List[OfflineSubmission]:
        return [
            OfflineSubmission(**s)
            for s in self.db.get_offline_submissions()
            if s.get("status") in ("pending", "failed")
        ]

    def remove(self, submission_id: str) -> bool:
        return self.db.remove_offline_submission(submission_id)

    def clear(self) -> None:
        self.db.clear_offline_submissions()
        logger.info("[OfflineSubmission] Cleared all offline submissions")
