"""Revocation record stores."""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol
from uuid import UUID

import yaml
from pydantic import ValidationError

from ..core.errors import LedgerStorageError
from ..core.models import RevocationRecord

log = logging.getLogger(__name__)


class RevocationStore(Protocol):
    """Persistence for revocation records, keyed by id and serial number."""

    def save(self, record: RevocationRecord) -> RevocationRecord: ...

    def find_one_by_id(self, record_id: UUID) -> Optional[RevocationRecord]: ...

    def find_one_by_serial_num(self, serial_number: int) -> Optional[RevocationRecord]: ...

    def find_all(self) -> list[RevocationRecord]: ...

    def find_all_by_revoker(self, admin_id: UUID) -> list[RevocationRecord]: ...

    def delete_by_id(self, record_id: UUID) -> None: ...


class InMemoryRevocationStore:
    """Revocation store held in process memory.

    Changes are applied to a copy of the record map, handed to ``_persist``
    and only swapped in once it returns, so a failed write leaves the store
    as it was.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[UUID, RevocationRecord] = {}

    def save(self, record: RevocationRecord) -> RevocationRecord:
        """Store a record, replacing any record with the same id.

        Raises:
            LedgerStorageError: If the change cannot be persisted
        """
        with self._lock:
            records = dict(self._records)
            records[record.id] = record
            self._persist(records)
            self._records = records
        return record

    def find_one_by_id(self, record_id: UUID) -> Optional[RevocationRecord]:
        """Get a record by id."""
        with self._lock:
            return self._records.get(record_id)

    def find_one_by_serial_num(self, serial_number: int) -> Optional[RevocationRecord]:
        """Get the record for a certificate serial number."""
        with self._lock:
            for record in self._records.values():
                if record.serial_number == serial_number:
                    return record
        return None

    def find_all(self) -> list[RevocationRecord]:
        """List all records in insertion order."""
        with self._lock:
            return list(self._records.values())

    def find_all_by_revoker(self, admin_id: UUID) -> list[RevocationRecord]:
        """List the records created by one admin."""
        with self._lock:
            return [r for r in self._records.values() if r.revoker == admin_id]

    def delete_by_id(self, record_id: UUID) -> None:
        """Remove a record; unknown ids are ignored.

        Raises:
            LedgerStorageError: If the change cannot be persisted
        """
        with self._lock:
            if record_id not in self._records:
                return
            records = dict(self._records)
            del records[record_id]
            self._persist(records)
            self._records = records

    def _persist(self, records: dict[UUID, RevocationRecord]) -> None:
        """Write-through hook, called with the lock held before a change is applied."""
        pass


class YamlRevocationStore(InMemoryRevocationStore):
    """Revocation store persisted to a YAML file on every change."""

    def __init__(self, path: str | Path):
        """Initialize the store, loading existing records from path.

        Args:
            path: YAML file holding the ledger (created on first write)

        Raises:
            LedgerStorageError: If an existing file cannot be parsed
        """
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self._records = self._load()

    def _load(self) -> dict[UUID, RevocationRecord]:
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
            records = [
                RevocationRecord.model_validate(item)
                for item in data.get("revocations", [])
            ]
        except (OSError, yaml.YAMLError, ValidationError, AttributeError) as e:
            raise LedgerStorageError(f"Failed to load ledger {self.path}: {e}")

        serials = [r.serial_number for r in records]
        if len(serials) != len(set(serials)):
            raise LedgerStorageError(
                f"Ledger {self.path} holds several records for one serial number"
            )

        log.info("Loaded %d revocation records from %s", len(records), self.path)
        return {record.id: record for record in records}

    def _persist(self, records: dict[UUID, RevocationRecord]) -> None:
        """Replace the ledger file with records, via a temporary file."""
        data = {
            "version": "1.0",
            "revocations": [record.model_dump(mode="json") for record in records.values()],
        }
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            log.error("Failed to write ledger %s: %s", self.path, e)
            raise LedgerStorageError(f"Failed to write ledger {self.path}: {e}")
