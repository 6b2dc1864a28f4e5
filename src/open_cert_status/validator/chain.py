"""Certificate chain validation."""

import logging
from typing import Optional

from cryptography import x509

from ..core.crypto import ReferenceTime, check_signature, check_validity, current_time
from ..core.models import ChainState, ChainValidationResult, RevocationStatus
from ..core.names import identity_of
from ..responder.ocsp import OCSPService
from ..trust.locator import CertificateLocator

log = logging.getLogger(__name__)

DEFAULT_MAX_CHAIN_DEPTH = 10


class ChainValidator:
    """Walks a certificate's issuer chain up to a self-signed root."""

    def __init__(
        self,
        locator: CertificateLocator,
        ocsp_service: OCSPService,
        max_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
    ):
        """Initialize validator.

        Args:
            locator: Locator resolving issuer certificates from the CA pools
            ocsp_service: Revocation decision engine
            max_depth: Maximum number of certificates evaluated per chain
        """
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.locator = locator
        self.ocsp_service = ocsp_service
        self.max_depth = max_depth

    def validate(
        self,
        certificate: Optional[x509.Certificate],
        at_time: Optional[ReferenceTime] = None,
    ) -> ChainValidationResult:
        """Validate a certificate and every issuer above it.

        Each certificate must resolve its issuer, have GOOD revocation status,
        be inside its validity window and carry a signature that verifies with
        the issuer's key. The walk ends as trusted only at a self-signed root
        that passes the same checks.

        Args:
            certificate: Leaf certificate
            at_time: Reference instant for validity checks (default: now)

        Returns:
            ChainValidationResult in the TRUSTED or UNTRUSTED state
        """
        if at_time is None:
            at_time = current_time()

        path: list[str] = []

        def untrusted(error: str) -> ChainValidationResult:
            log.info("Chain untrusted: %s", error)
            return ChainValidationResult(
                trusted=False,
                state=ChainState.UNTRUSTED,
                error=error,
                depth=len(path),
                path=path,
            )

        if certificate is None:
            return untrusted("Certificate is absent")

        state = ChainState.VALIDATING
        current = certificate

        while state == ChainState.VALIDATING:
            if len(path) >= self.max_depth:
                return untrusted(f"Maximum chain depth {self.max_depth} exceeded")

            subject = identity_of(current.subject)
            path.append(subject)

            issuer_name = identity_of(current.issuer)
            issuer = self.locator.find_ca_certificate(issuer_name)
            if issuer is None:
                return untrusted(f"Issuer not found: {issuer_name}")

            status = self.ocsp_service.check(current, issuer)
            if status != RevocationStatus.GOOD:
                return untrusted(f"Revocation status of {subject} is {status.value}")

            if not check_validity(current, at_time):
                return untrusted(f"Certificate {subject} is outside its validity period")

            if not check_signature(current, issuer.public_key()):
                return untrusted(f"Signature of {subject} does not verify")

            if current == issuer:
                state = ChainState.TRUSTED
            else:
                log.debug("Hop %d: %s issued by %s", len(path), subject, issuer_name)
                current = issuer

        return ChainValidationResult(
            trusted=True, state=state, depth=len(path), path=path
        )

    def is_chain_trusted(
        self,
        certificate: Optional[x509.Certificate],
        at_time: Optional[ReferenceTime] = None,
    ) -> bool:
        """Check if a certificate chain is trusted.

        Args:
            certificate: Leaf certificate

        Returns:
            True if every hop up to and including the root passes
        """
        return self.validate(certificate, at_time).trusted
