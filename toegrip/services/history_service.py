import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from toegrip.config import config
from toegrip.models.schemas import SessionRecord
from toegrip.utils.logging_utils import logger

class HistoryService:
    """
    Bounded session history stored as a JSON list on disk.
    Storage problems are logged and never raised, so ending a session cannot fail on them.
    """

    def __init__(self, path: Optional[Path] = None, limit: Optional[int] = None):
        self.path = Path(path) if path is not None else config.history_path
        self.limit = limit if limit is not None else config.history_limit

    def load(self) -> List[SessionRecord]:
        records = self._read_records()
        return records if records is not None else []

    def _read_records(self) -> Optional[List[SessionRecord]]:
        """Existing records; None when the file exists but can't be read as a list"""
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading session history {self.path}: {e}")
            return None

        if not isinstance(raw, list):
            logger.error(f"Session history {self.path} is not a list")
            return None

        records = []
        for item in raw:
            try:
                records.append(SessionRecord.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed session record: {e}")
        return records

    def save(self, record: SessionRecord) -> None:
        """
        Append a record, keeping only the most recent `limit` entries.
        An unreadable history file is left untouched and the record is dropped.
        """
        records = self._read_records()
        if records is None:
            logger.error(f"Session not saved: refusing to overwrite unreadable history {self.path}")
            return

        records.append(record)
        records = records[-self.limit:]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([r.model_dump() for r in records], indent=2),
                encoding="utf-8",
            )
            logger.info(f"Session saved: score={record.score}, reps={record.reps} ({len(records)} stored)")
        except OSError as e:
            logger.error(f"Error saving session history {self.path}: {e}")
