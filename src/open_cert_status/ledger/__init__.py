"""Revocation ledger and its collaborators."""

from .admins import AdminDirectory, InMemoryAdminDirectory
from .ledger import RevocationLedger
from .store import InMemoryRevocationStore, RevocationStore, YamlRevocationStore

__all__ = [
    "AdminDirectory",
    "InMemoryAdminDirectory",
    "RevocationLedger",
    "RevocationStore",
    "InMemoryRevocationStore",
    "YamlRevocationStore",
]
