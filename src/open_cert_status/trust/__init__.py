"""Certificate pools and lookup."""

from .locator import CertificateLocator
from .store import (
    CA_POOLS,
    END_USER_POOL,
    INTERMEDIATE_POOL,
    ROOT_POOL,
    FileKeyStoreReader,
    InMemoryKeyStoreReader,
    KeyStoreReader,
)

__all__ = [
    "CertificateLocator",
    "KeyStoreReader",
    "InMemoryKeyStoreReader",
    "FileKeyStoreReader",
    "CA_POOLS",
    "INTERMEDIATE_POOL",
    "ROOT_POOL",
    "END_USER_POOL",
]
