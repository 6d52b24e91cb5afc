"""
Best-effort keyed blob store on top of the app_state table.

Values are JSON-serializable blobs. A blob that can't be decoded by its reader
is the reader's problem; the store only moves bytes by key.
"""

import logging

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
CURRENT_CALCULATION_KEY = "current_calculation"
PIPE_CALCULATION_KEY = "ms_pipe_calculation"


class KeyValueStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str, default=None):
        row = self.db.query(models.AppState).filter(models.AppState.key == key).first()
        if row is None or row.value is None:
            return default
        return row.value

    def put(self, key: str, value) -> None:
        row = self.db.query(models.AppState).filter(models.AppState.key == key).first()
        if row is None:
            row = models.AppState(key=key, value=value)
            self.db.add(row)
        else:
            row.value = value
        self.db.commit()

    def delete(self, key: str) -> bool:
        deleted = self.db.query(models.AppState).filter(models.AppState.key == key).delete()
        self.db.commit()
        return bool(deleted)
