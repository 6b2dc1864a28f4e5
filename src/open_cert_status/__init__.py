"""Open Cert Status - Certificate chain validation with a local OCSP-style revocation ledger."""

from .config import Settings, build_components
from .core import (
    AdminIdentity,
    ChainValidationResult,
    RevocationRecord,
    RevocationStatus,
    check_signature,
    check_validity,
    email_from_name,
    identity_of,
    load_certificate,
)
from .ledger import InMemoryAdminDirectory, RevocationLedger
from .responder import OCSPService
from .trust import CertificateLocator, FileKeyStoreReader, InMemoryKeyStoreReader
from .validator import ChainValidator

__version__ = "0.1.0"

__all__ = [
    # Config
    "Settings",
    "build_components",
    # Core
    "AdminIdentity",
    "ChainValidationResult",
    "RevocationRecord",
    "RevocationStatus",
    "check_signature",
    "check_validity",
    "email_from_name",
    "identity_of",
    "load_certificate",
    # Ledger
    "InMemoryAdminDirectory",
    "RevocationLedger",
    # Responder
    "OCSPService",
    # Trust
    "CertificateLocator",
    "FileKeyStoreReader",
    "InMemoryKeyStoreReader",
    # Validator
    "ChainValidator",
]
