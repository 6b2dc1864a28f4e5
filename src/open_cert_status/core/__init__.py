"""Core functionality for open-cert-status."""

from .crypto import (
    assert_validity,
    check_signature,
    check_validity,
    current_time,
    load_certificate,
    parse_reference_time,
    verify_signature,
)
from .errors import (
    OpenCertStatusError,
    NotFoundError,
    IssuerNotFoundError,
    RecordNotFoundError,
    UnauthorizedError,
    UnknownAdminError,
    NotRevokerError,
    InvalidInputError,
    MissingCertificateError,
    InvalidReferenceTimeError,
    CertificateParseError,
    VerificationFailedError,
    CertificateExpiredError,
    CertificateNotYetValidError,
    InvalidCertificateSignatureError,
    UnsupportedAlgorithmError,
    IssuerMismatchError,
    LedgerStorageError,
    DuplicateRecordError,
    ConfigurationError,
    KeyStoreError,
)
from .models import (
    AdminIdentity,
    ChainState,
    ChainValidationResult,
    RevocationRecord,
    RevocationStatus,
)
from .names import (
    EmailIdentityMatcher,
    ExactNameMatcher,
    IdentityMatcher,
    email_from_name,
    identity_of,
)

__all__ = [
    # Crypto
    "assert_validity",
    "check_signature",
    "check_validity",
    "current_time",
    "load_certificate",
    "parse_reference_time",
    "verify_signature",
    # Errors
    "OpenCertStatusError",
    "NotFoundError",
    "IssuerNotFoundError",
    "RecordNotFoundError",
    "UnauthorizedError",
    "UnknownAdminError",
    "NotRevokerError",
    "InvalidInputError",
    "MissingCertificateError",
    "InvalidReferenceTimeError",
    "CertificateParseError",
    "VerificationFailedError",
    "CertificateExpiredError",
    "CertificateNotYetValidError",
    "InvalidCertificateSignatureError",
    "UnsupportedAlgorithmError",
    "IssuerMismatchError",
    "LedgerStorageError",
    "DuplicateRecordError",
    "ConfigurationError",
    "KeyStoreError",
    # Models
    "AdminIdentity",
    "ChainState",
    "ChainValidationResult",
    "RevocationRecord",
    "RevocationStatus",
    # Names
    "EmailIdentityMatcher",
    "ExactNameMatcher",
    "IdentityMatcher",
    "email_from_name",
    "identity_of",
]
