"""Tests for the revocation ledger, its stores and the admin directory."""

from uuid import uuid4

import pytest

from open_cert_status.core.errors import DuplicateRecordError, LedgerStorageError
from open_cert_status.core.models import RevocationRecord
from open_cert_status.ledger import store as ledger_store
from open_cert_status.ledger import (
    InMemoryAdminDirectory,
    RevocationLedger,
    YamlRevocationStore,
)


def _record(serial_number, revoker=None):
    return RevocationRecord(
        serial_number=serial_number,
        issuer="EMAILADDRESS=issuing@ca.example.com,CN=Example Issuing CA",
        email="alice@example.com",
        revoker=revoker or uuid4(),
    )


def test_ledger_lookups():
    """Test insert and every lookup path."""
    ledger = RevocationLedger()
    admin = uuid4()
    first = ledger.insert(_record(1001, admin))
    second = ledger.insert(_record(1002, admin))
    ledger.insert(_record(1003))

    assert ledger.find_by_id(first.id) == first
    assert ledger.find_by_serial(1002) == second
    assert ledger.find_by_serial(9999) is None
    assert ledger.find_by_id(uuid4()) is None
    assert {r.serial_number for r in ledger.find_all_by_revoker(admin)} == {1001, 1002}
    assert len(ledger.find_all()) == 3
    assert len(ledger) == 3


def test_ledger_delete():
    """Test deleting a record removes it entirely."""
    ledger = RevocationLedger()
    record = ledger.insert(_record(42))

    ledger.delete_by_id(record.id)

    assert ledger.find_by_serial(42) is None
    assert len(ledger) == 0

    # Deleting again is harmless
    ledger.delete_by_id(record.id)


def test_ledger_rejects_second_record_for_serial():
    """Test one record per serial number."""
    ledger = RevocationLedger()
    ledger.insert(_record(7))

    with pytest.raises(DuplicateRecordError):
        ledger.insert(_record(7))
    assert len(ledger) == 1


def test_large_serial_numbers():
    """Test 159-bit serial numbers are stored exactly."""
    serial = (1 << 158) + 12345
    ledger = RevocationLedger()
    ledger.insert(_record(serial))

    assert ledger.find_by_serial(serial).serial_number == serial
    assert ledger.find_by_serial(serial + 1) is None


def test_yaml_store_persists_records(tmp_path):
    """Test records survive reloading the YAML ledger."""
    path = tmp_path / "ledger.yaml"
    serial = (1 << 150) + 7
    ledger = RevocationLedger(YamlRevocationStore(path))
    kept = ledger.insert(_record(serial))
    dropped = ledger.insert(_record(5))
    ledger.delete_by_id(dropped.id)

    reloaded = RevocationLedger(YamlRevocationStore(path))

    assert [r.id for r in reloaded.find_all()] == [kept.id]
    record = reloaded.find_by_serial(serial)
    assert record == kept
    assert record.revoked_at == kept.revoked_at


def test_yaml_store_corrupt_file(tmp_path):
    """Test unreadable ledgers raise LedgerStorageError."""
    path = tmp_path / "ledger.yaml"
    path.write_text("revocations:\n  - serial_number: not-a-number\n")

    with pytest.raises(LedgerStorageError):
        YamlRevocationStore(path)

    path.write_text("revocations: [unclosed\n")
    with pytest.raises(LedgerStorageError):
        YamlRevocationStore(path)


def test_yaml_store_duplicate_serials(tmp_path):
    """Test a ledger with two records for one serial is rejected."""
    path = tmp_path / "ledger.yaml"
    store = YamlRevocationStore(path)
    store.save(_record(11))
    store.save(_record(11))

    with pytest.raises(LedgerStorageError):
        YamlRevocationStore(path)


def test_admin_directory():
    """Test admin lookup honours the enabled flag."""
    directory = InMemoryAdminDirectory()
    active = uuid4()
    disabled = uuid4()
    directory.add_admin(active, name="Alice")
    directory.add_admin(disabled, name="Mallory", enabled=False)

    assert directory.find_one_by_id(active).name == "Alice"
    assert directory.find_one_by_id(disabled) is None
    assert directory.find_one_by_id(uuid4()) is None
    assert len(directory.list_admins()) == 2

    directory.remove_admin(active)
    assert directory.find_one_by_id(active) is None


def test_yaml_store_failed_write_keeps_state(tmp_path):
    """Test a save that cannot be written leaves nothing behind in memory."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    ledger = RevocationLedger(YamlRevocationStore(blocker / "ledger.yaml"))

    with pytest.raises(LedgerStorageError):
        ledger.insert(_record(21))

    assert ledger.find_by_serial(21) is None
    assert len(ledger) == 0


def test_yaml_store_failed_delete_keeps_record(tmp_path, monkeypatch):
    """Test a delete that cannot be written keeps the record and the file."""
    path = tmp_path / "ledger.yaml"
    ledger = RevocationLedger(YamlRevocationStore(path))
    record = ledger.insert(_record(22))
    written = path.read_text()

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(ledger_store.os, "replace", failing_replace)

    with pytest.raises(LedgerStorageError):
        ledger.delete_by_id(record.id)

    assert ledger.find_by_serial(22) == record
    assert path.read_text() == written
    assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.yaml"]

    monkeypatch.undo()
    ledger.delete_by_id(record.id)
    assert RevocationLedger(YamlRevocationStore(path)).find_all() == []


def test_serial_locks_are_released():
    """Test lock entries only exist while a serial is locked."""
    ledger = RevocationLedger()

    with ledger.serial_lock(1):
        with ledger.serial_lock(2):
            assert ledger.active_locks == 2
        assert ledger.active_locks == 1
    assert ledger.active_locks == 0

    with pytest.raises(RuntimeError):
        with ledger.serial_lock(3):
            raise RuntimeError("boom")
    assert ledger.active_locks == 0


def test_serial_locks_bounded_after_many_cycles(pki):
    """Test revoke/activate cycles on many serials leave no lock entries."""
    for _ in range(200):
        certificate = pki.reissue("leaf")
        pki.service.revoke(certificate, pki.admin_id)
        pki.service.activate(certificate, pki.other_admin_id)
        pki.service.activate(certificate, pki.admin_id)

    assert len(pki.ledger) == 0
    assert pki.ledger.active_locks == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
