"""Certificate validity-window and signature checks."""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric.types import CertificatePublicKeyTypes

from .errors import (
    CertificateExpiredError,
    CertificateNotYetValidError,
    CertificateParseError,
    InvalidCertificateSignatureError,
    InvalidInputError,
    InvalidReferenceTimeError,
    MissingCertificateError,
    UnsupportedAlgorithmError,
)

log = logging.getLogger(__name__)

REFERENCE_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

ReferenceTime = Union[datetime, str]


def current_time() -> datetime:
    """Get the current instant in UTC."""
    return datetime.now(timezone.utc)


def parse_reference_time(value: Optional[ReferenceTime]) -> datetime:
    """Parse a reference instant.

    Args:
        value: Aware or naive datetime (naive is taken as UTC), or a string in
            "yyyy/MM/dd HH:mm:ss" or ISO 8601 format

    Returns:
        Timezone-aware UTC datetime

    Raises:
        InvalidReferenceTimeError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.strptime(value, REFERENCE_TIME_FORMAT)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                raise InvalidReferenceTimeError(f"Unparseable reference time: {value!r}")
    else:
        raise InvalidReferenceTimeError(f"Unsupported reference time: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def load_certificate(data: Union[str, bytes]) -> x509.Certificate:
    """Load a certificate from PEM or DER data.

    Raises:
        CertificateParseError: If the data is not a certificate
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        if data.lstrip().startswith(b"-----BEGIN"):
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as e:
        raise CertificateParseError(f"Failed to parse certificate: {e}")


def assert_validity(
    certificate: Optional[x509.Certificate], reference: Optional[ReferenceTime]
) -> None:
    """Validate a certificate's time window against a reference instant.

    Args:
        certificate: Certificate to check
        reference: Instant that must fall within [not_before, not_after]

    Raises:
        MissingCertificateError: If certificate is None
        InvalidReferenceTimeError: If the reference instant cannot be parsed
        CertificateNotYetValidError: If reference is before not_before
        CertificateExpiredError: If reference is after not_after
    """
    if certificate is None:
        raise MissingCertificateError("Certificate is absent")

    at_time = parse_reference_time(reference)

    if at_time < certificate.not_valid_before_utc:
        raise CertificateNotYetValidError(
            f"Certificate not yet valid (not_before: {certificate.not_valid_before_utc})"
        )

    if at_time > certificate.not_valid_after_utc:
        raise CertificateExpiredError(
            f"Certificate expired (not_after: {certificate.not_valid_after_utc})"
        )


def check_validity(
    certificate: Optional[x509.Certificate], reference: Optional[ReferenceTime]
) -> bool:
    """Check a certificate's time window.

    Args:
        certificate: Certificate to check
        reference: Reference instant

    Returns:
        True if the reference instant is within the validity window
    """
    try:
        assert_validity(certificate, reference)
    except MissingCertificateError:
        log.warning("Validity check on absent certificate")
        return False
    except InvalidReferenceTimeError as e:
        log.warning("Validity check with bad reference time: %s", e)
        return False
    except CertificateNotYetValidError as e:
        log.warning("Serial %x: %s", certificate.serial_number, e)
        return False
    except CertificateExpiredError as e:
        log.warning("Serial %x: %s", certificate.serial_number, e)
        return False
    return True


def verify_signature(
    certificate: Optional[x509.Certificate],
    issuer_public_key: Optional[CertificatePublicKeyTypes],
) -> None:
    """Verify that a certificate was signed with the issuer's key.

    Uses the certificate's declared signature algorithm.

    Args:
        certificate: Certificate whose signature is checked
        issuer_public_key: Public key of the claimed issuer

    Raises:
        MissingCertificateError: If certificate is None
        InvalidInputError: If issuer_public_key is None
        UnsupportedAlgorithmError: If the key type or algorithm is not supported
        InvalidCertificateSignatureError: If the signature does not verify
    """
    if certificate is None:
        raise MissingCertificateError("Certificate is absent")
    if issuer_public_key is None:
        raise InvalidInputError("Issuer public key is absent")

    signature = certificate.signature
    tbs = certificate.tbs_certificate_bytes

    try:
        if isinstance(issuer_public_key, rsa.RSAPublicKey):
            issuer_public_key.verify(
                signature,
                tbs,
                certificate.signature_algorithm_parameters,
                certificate.signature_hash_algorithm,
            )
        elif isinstance(issuer_public_key, ec.EllipticCurvePublicKey):
            issuer_public_key.verify(
                signature, tbs, certificate.signature_algorithm_parameters
            )
        elif isinstance(
            issuer_public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)
        ):
            issuer_public_key.verify(signature, tbs)
        elif isinstance(issuer_public_key, dsa.DSAPublicKey):
            issuer_public_key.verify(
                signature, tbs, certificate.signature_hash_algorithm
            )
        else:
            raise UnsupportedAlgorithmError(
                f"Unsupported issuer key type: {type(issuer_public_key).__name__}"
            )
    except InvalidSignature:
        raise InvalidCertificateSignatureError(
            "Certificate signature verification failed"
        )
    except UnsupportedAlgorithm as e:
        raise UnsupportedAlgorithmError(f"Unsupported signature algorithm: {e}")
    except (TypeError, ValueError) as e:
        raise InvalidCertificateSignatureError(
            f"Signature algorithm does not match issuer key: {e}"
        )


def check_signature(
    certificate: Optional[x509.Certificate],
    issuer_public_key: Optional[CertificatePublicKeyTypes],
) -> bool:
    """Check a certificate's signature against an issuer public key.

    Args:
        certificate: Certificate to check
        issuer_public_key: Public key of the claimed issuer

    Returns:
        True if the signature verifies, False otherwise
    """
    try:
        verify_signature(certificate, issuer_public_key)
    except InvalidInputError as e:
        log.warning("Signature check skipped: %s", e)
        return False
    except UnsupportedAlgorithmError as e:
        log.warning("Serial %x: %s", certificate.serial_number, e)
        return False
    except InvalidCertificateSignatureError as e:
        log.warning("Serial %x: %s", certificate.serial_number, e)
        return False
    return True
