import json
import os
from typing import Generator
from agriplot.config import settings

# --- JSON REPOSITORY ---
class JsonDatabase:
    def __init__(self, file_path: str = None):
        self.file_path = file_path or settings.DB_FILE
        self._ensure_db_exists()

    def _ensure_db_exists(self):
        if not os.path.exists(self.file_path):
            with open(self.file_path, "w") as f:
                json.dump({"offline_submissions": []}, f)

    def read(self):
        with open(self.file_path, "r") as f:
            data = json.load(f)
        data.setdefault("offline_submissions", [])
        return data

    def write(self, data):
        with open(self.file_path, "w") as f:
            json.dump(data, f, indent=4)

    def get_offline_submissions(self):
        return self.read()["offline_submissions"]

    def add_offline_submission(self, submission: dict):
        data = self.read()
        data["offline_submissions"].append(submission)
        self.write(data)
        return submission

    def remove_offline_submission(self, submission_id: str) -> bool:
        data = self.read()
        remaining = [s for s in data["offline_submissions"] if s["id"] != submission_id]
        removed = len(remaining) != len(data["offline_submissions"])
        data["offline_submissions"] = remaining
        self.write(data)
        return removed

    def clear_offline_submissions(self):
        data = self.read()
        data["offline_submissions"] = []
        self.write(data)

# Dependency Injection
def get_db() -> Generator:
    db = JsonDatabase()
    try:
        yield db
    finally:
        pass
