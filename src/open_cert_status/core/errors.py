"""Exception hierarchy for open-cert-status."""


class OpenCertStatusError(Exception):
    """Base exception for all open-cert-status errors."""

    pass


# Lookup errors
class NotFoundError(OpenCertStatusError):
    """Base exception for failed lookups."""

    pass


class IssuerNotFoundError(NotFoundError):
    """Issuer certificate could not be resolved in any CA pool."""

    pass


class RecordNotFoundError(NotFoundError):
    """No revocation record exists for the certificate."""

    pass


# Authorization errors
class UnauthorizedError(OpenCertStatusError):
    """Base exception for rejected state changes."""

    pass


class UnknownAdminError(UnauthorizedError):
    """Admin identifier does not resolve to a known admin."""

    pass


class NotRevokerError(UnauthorizedError):
    """Admin is not the one who revoked the certificate."""

    pass


# Input errors
class InvalidInputError(OpenCertStatusError):
    """Base exception for absent or malformed arguments."""

    pass


class MissingCertificateError(InvalidInputError):
    """A certificate argument is absent."""

    pass


class InvalidReferenceTimeError(InvalidInputError):
    """Reference instant could not be parsed."""

    pass


class CertificateParseError(InvalidInputError):
    """Failed to parse certificate."""

    pass


# Verification errors
class VerificationFailedError(OpenCertStatusError):
    """Base exception for failed certificate checks."""

    pass


class CertificateExpiredError(VerificationFailedError):
    """Certificate has expired."""

    pass


class CertificateNotYetValidError(VerificationFailedError):
    """Certificate is not yet valid."""

    pass


class InvalidCertificateSignatureError(VerificationFailedError):
    """Certificate signature is invalid."""

    pass


class UnsupportedAlgorithmError(VerificationFailedError):
    """Certificate signature algorithm or issuer key type is not supported."""

    pass


class IssuerMismatchError(VerificationFailedError):
    """Certificate names a different issuer than the one supplied."""

    pass


# Storage errors
class LedgerStorageError(OpenCertStatusError):
    """Revocation ledger storage is unreadable or inconsistent."""

    pass


class DuplicateRecordError(LedgerStorageError):
    """A revocation record already exists for the serial number."""

    pass


# Configuration errors
class ConfigurationError(OpenCertStatusError):
    """Base exception for configuration errors."""

    pass


class KeyStoreError(ConfigurationError):
    """Key store could not be read."""

    pass
