"""Revocation ledger: the record store plus per-serial-number locking."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional
from uuid import UUID

from ..core.errors import DuplicateRecordError
from ..core.models import RevocationRecord
from .store import InMemoryRevocationStore, RevocationStore

log = logging.getLogger(__name__)


class _SerialLock:
    """A lock plus the number of callers holding or waiting for it."""

    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class RevocationLedger:
    """Maps certificate serial numbers to revocation records.

    At most one record exists per serial number. Callers that read and then
    write a serial's record hold ``serial_lock(serial)`` for the whole
    sequence.
    """

    def __init__(self, store: Optional[RevocationStore] = None):
        """Initialize ledger.

        Args:
            store: Backing record store (default: in-memory)
        """
        self.store = store if store is not None else InMemoryRevocationStore()
        self._locks_guard = threading.Lock()
        self._serial_locks: dict[int, _SerialLock] = {}

    @contextmanager
    def serial_lock(self, serial_number: int) -> Iterator[None]:
        """Hold the mutual-exclusion lock for one serial number.

        The lock entry exists only while some caller holds or waits for it.
        """
        with self._locks_guard:
            entry = self._serial_locks.get(serial_number)
            if entry is None:
                entry = self._serial_locks[serial_number] = _SerialLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._serial_locks[serial_number]

    @property
    def active_locks(self) -> int:
        """Number of serial numbers currently locked or awaited."""
        with self._locks_guard:
            return len(self._serial_locks)

    def insert(self, record: RevocationRecord) -> RevocationRecord:
        """Add a record.

        Raises:
            DuplicateRecordError: If the serial number already has a record
            LedgerStorageError: If the store cannot persist the record
        """
        if self.store.find_one_by_serial_num(record.serial_number) is not None:
            raise DuplicateRecordError(
                f"Serial {record.serial_number:x} already has a revocation record"
            )
        saved = self.store.save(record)
        log.info(
            "Recorded revocation of serial %x by admin %s",
            record.serial_number,
            record.revoker,
        )
        return saved

    def find_by_id(self, record_id: UUID) -> Optional[RevocationRecord]:
        """Get a record by id."""
        return self.store.find_one_by_id(record_id)

    def find_by_serial(self, serial_number: int) -> Optional[RevocationRecord]:
        """Get the record for a serial number, None if it is not revoked."""
        return self.store.find_one_by_serial_num(serial_number)

    def find_all(self) -> list[RevocationRecord]:
        """List all records."""
        return self.store.find_all()

    def find_all_by_revoker(self, admin_id: UUID) -> list[RevocationRecord]:
        """List the records created by one admin."""
        return self.store.find_all_by_revoker(admin_id)

    def delete_by_id(self, record_id: UUID) -> None:
        """Remove a record.

        Raises:
            LedgerStorageError: If the store cannot persist the removal
        """
        self.store.delete_by_id(record_id)
        log.info("Deleted revocation record %s", record_id)

    def __len__(self) -> int:
        return len(self.store.find_all())
