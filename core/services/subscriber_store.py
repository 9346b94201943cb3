# =============================================================================
# core/services/subscriber_store.py - Flat-File Subscriber Store
# =============================================================================
# Owns the JSON file holding the subscriber list. Nothing else in the
# project reads or writes that file.
#
# - Every call re-reads the file; there is no cache across requests.
# - Writes replace the whole file atomically (temp file + os.replace), so a
#   crash mid-write leaves either the old or the new collection on disk.
# - Blocking file I/O runs in a worker thread so the event loop stays free.
#
# Usage:
#   store = SubscriberStore("data/subscribers.json")
#   store.ensure_exists()
#   if not await store.exists("ann@example.com"):
#       await store.append(Subscriber(email="ann@example.com", name="Ann"))
# =============================================================================

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from core.exceptions import DuplicateSubscriberError, StorageCorruptError, StorageIOError
from core.models.subscriber import Subscriber, normalize_email

logger = logging.getLogger(__name__)


class SubscriberStore:
    """
    Append-only store of Subscriber records backed by one JSON file.

    Emails are unique across the file, compared case-insensitively.
    Records are never updated or removed.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    # =========================================================================
    # Public API
    # =========================================================================

    async def load_all(self) -> list[Subscriber]:
        """
        Read every stored record.

        Returns:
            Records in insertion order; empty if the file does not exist

        Raises:
            StorageCorruptError: If the file exists but cannot be parsed
            StorageIOError: If the file cannot be read
        """
        return await asyncio.to_thread(self._read_records)

    async def exists(self, email: str) -> bool:
        """Check whether an email is already stored (case-insensitive)."""
        key = normalize_email(email)
        records = await self.load_all()
        return any(record.key == key for record in records)

    async def count(self) -> int:
        """Return the number of stored records."""
        return len(await self.load_all())

    async def append(self, record: Subscriber) -> Subscriber:
        """
        Append one record and persist the full collection.

        Uniqueness is re-checked against fresh disk state right before the
        write. If the existing file is corrupt, its bytes are moved aside to
        a ``.corrupt-<timestamp>`` sidecar first and the collection restarts
        from empty.

        Args:
            record: The subscriber to add

        Returns:
            The stored record

        Raises:
            DuplicateSubscriberError: If the email is already stored
            StorageIOError: If the file cannot be read, moved or written
        """
        return await asyncio.to_thread(self._append_sync, record)

    def ensure_exists(self) -> None:
        """
        Create the data directory and an empty store file if missing.

        Called once at startup, before the event loop serves requests.

        Raises:
            StorageIOError: If the directory or file cannot be created
        """
        if not self.path.exists():
            self._write_records([])
            logger.info(f"Created empty subscriber store at {self.path}")

    # =========================================================================
    # File Operations
    # =========================================================================

    def _read_records(self) -> list[Subscriber]:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Failed to read subscriber store {self.path}: {e}")
            raise StorageIOError(str(self.path), str(e))

        try:
            raw = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageCorruptError(str(self.path), f"not UTF-8: {e}")

        # A whitespace-only file holds no data worth preserving
        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(str(self.path), f"invalid JSON: {e}")

        if not isinstance(data, list):
            raise StorageCorruptError(str(self.path), f"expected a JSON array, got {type(data).__name__}")

        try:
            return [Subscriber.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageCorruptError(str(self.path), f"invalid record: {e.error_count()} validation error(s)")

    def _write_records(self, records: list[Subscriber]) -> None:
        payload = json.dumps([record.to_record() for record in records], indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
        except OSError as e:
            logger.error(f"Failed to prepare temp file next to {self.path}: {e}")
            raise StorageIOError(str(self.path), str(e))

        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            logger.error(f"Failed to write subscriber store {self.path}: {e}")
            raise StorageIOError(str(self.path), str(e))

    def _quarantine(self) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, target)
        except OSError as e:
            logger.error(f"Failed to move corrupt store {self.path} aside: {e}")
            raise StorageIOError(str(self.path), str(e))
        return target

    def _append_sync(self, record: Subscriber) -> Subscriber:
        try:
            records = self._read_records()
        except StorageCorruptError as e:
            target = self._quarantine()
            logger.error(f"{e.message}; preserved original bytes at {target}, starting a new store")
            records = []

        if any(existing.key == record.key for existing in records):
            raise DuplicateSubscriberError(record.email)

        records.append(record)
        self._write_records(records)

        logger.info(f"Stored subscriber #{len(records)} in {self.path.name}")
        return record
