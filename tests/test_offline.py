import re

from agriplot.database import JsonDatabase
from agriplot.modules.offline.services import OfflineQueue, build_offline_submission, payload_hash

PAYLOAD = {
    "coordinates": [{"latitude": 0.0, "longitude": 0.0}],
    "Soil_Type": "Loam",
    "Soil_Suitability": "High",
    "Hectares": "1.24",
    "Status": "Inactive",
}


def test_payload_hash_ignores_key_order():
    reordered = dict(reversed(list(PAYLOAD.items())))
    assert payload_hash(PAYLOAD) == payload_hash(reordered)
    assert re.fullmatch(r"[0-9a-f]{9}", payload_hash(PAYLOAD))


def test_build_offline_submission_record():
    submission = build_offline_submission(
        "/area/12/farm", "POST", PAYLOAD, error_message="Network Error", timestamp_ms=1700000000000
    )
    assert submission.id == f"farm_1700000000000_{payload_hash(PAYLOAD)}"
    assert submission.endpoint == "/area/12/farm"
    assert submission.method == "POST"
    assert submission.retries == 0
    assert submission.status == "pending"
    assert submission.payload == PAYLOAD


def test_queue_round_trip(db_file):
    queue = OfflineQueue(JsonDatabase())
    first = queue.save(build_offline_submission("/area/12/farm", "POST", PAYLOAD, timestamp_ms=1))
    queue.save(build_offline_submission("/area/12/farm/7", "PUT", PAYLOAD, timestamp_ms=2))

    pending = queue.get_pending()
    assert [s.method for s in pending] == ["POST", "PUT"]
    assert db_file.exists()

    assert queue.remove(first.id)
    assert not queue.remove(first.id)
    assert [s.endpoint for s in queue.get_pending()] == ["/area/12/farm/7"]

    queue.clear()
    assert queue.get_pending() == []


def test_saving_same_record_twice_keeps_one(db_file):
    queue = OfflineQueue(JsonDatabase())
    submission = build_offline_submission("/area/12/farm", "POST", PAYLOAD, timestamp_ms=5)
    queue.save(submission)
    queue.save(submission)
    assert len(queue.get_pending()) == 1


def test_syncing_records_are_not_pending(db_file):
    db = JsonDatabase()
    record = build_offline_submission("/area/12/farm", "POST", PAYLOAD, timestamp_ms=9).model_dump()
    record["status"] = "syncing"
    db.add_offline_submission(record)
    assert OfflineQueue(db).get_pending() == []


def test_clear_empties_the_queue(db_file):
    db = JsonDatabase()
    queue = OfflineQueue(db)
    queue.save(build_offline_submission("/area/12/farm", "POST", PAYLOAD, timestamp_ms=1))
    queue.save(build_offline_submission("/area/12/farm/7", "PUT", PAYLOAD, timestamp_ms=2))
    queue.clear()
    assert db.get_offline_submissions() == []
