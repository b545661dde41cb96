"""
JSON-file record store.

All signature records live in a single JSON array on disk. There is no
index and no cache: every append reads the whole file, adds one record
and rewrites the whole file. That is fine at the volume a signing form
produces. Concurrent appends are not serialized -- the last writer wins.

Reads fail soft. A missing file is created empty; an unreadable or
malformed file is logged and treated as empty so the lookup page keeps
answering. A single entry that does not fit SignatureRecord is skipped by
load() but left on disk: append() works on the raw JSON list, so it never
drops what it could not parse. Writes are logged on failure and never raise.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from signature_api.models.schemas import SignatureRecord

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class RecordStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_raw(self) -> list[Any]:
        if not self.path.exists():
            self._write_raw([])
            return []

        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            return raw
        except (OSError, ValueError):
            # json.JSONDecodeError is a ValueError
            logger.exception("Failed to load records from %s", self.path)
            return []

    def _write_raw(self, payload: list[Any]) -> None:
        try:
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save %d records to %s", len(payload), self.path)

    def load(self) -> list[SignatureRecord]:
        records = []
        for i, item in enumerate(self._read_raw()):
            try:
                records.append(SignatureRecord.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping record #%d in %s: %s", i, self.path, e)
        return records

    def save(self, records: list[SignatureRecord]) -> None:
        self._write_raw([r.model_dump(by_alias=True, mode="json") for r in records])

    def append(self, fields: dict[str, Any]) -> SignatureRecord:
        """Persist a new record built from `fields` (keyed by JSON alias).

        Optional fields that are missing or empty are stored as null;
        criadoEm is always set here, overriding anything in `fields`.
        """
        raw = self._read_raw()

        data = {key: (value if value not in ("", None) else None) for key, value in fields.items()}
        data["criadoEm"] = utc_now_iso()
        record = SignatureRecord.model_validate(data)

        raw.append(record.model_dump(by_alias=True, mode="json"))
        self._write_raw(raw)
        logger.info(
            "Stored signature record id=%s hash=%s (%d total)",
            record.signature_id, record.hash, len(raw),
        )
        return record

    def find(self, key: str) -> SignatureRecord | None:
        """First record, in insertion order, whose ID or hash equals key."""
        for record in self.load():
            if record.signature_id == key or record.hash == key:
                return record
        return None

    def count(self) -> int:
        return len(self.load())
