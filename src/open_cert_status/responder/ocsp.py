"""Revocation decision engine answering OCSP-style status queries."""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from cryptography import x509

from ..core.crypto import current_time
from ..core.errors import (
    IssuerMismatchError,
    IssuerNotFoundError,
    MissingCertificateError,
    NotRevokerError,
    RecordNotFoundError,
    UnauthorizedError,
    UnknownAdminError,
)
from ..core.models import AdminIdentity, RevocationRecord, RevocationStatus
from ..core.names import email_from_name, identity_of
from ..ledger.admins import AdminDirectory
from ..ledger.ledger import RevocationLedger
from ..trust.locator import CertificateLocator

log = logging.getLogger(__name__)


class OCSPService:
    """Decides revocation status and applies admin revoke/reinstate requests."""

    def __init__(
        self,
        ledger: RevocationLedger,
        locator: CertificateLocator,
        admins: AdminDirectory,
        validity_period: int = 86400,
    ):
        """Initialize OCSP service.

        Args:
            ledger: Revocation ledger
            locator: Locator used to resolve issuer certificates
            admins: Directory resolving admin identifiers
            validity_period: How long status reports are valid (seconds)
        """
        self.ledger = ledger
        self.locator = locator
        self.admins = admins
        self.validity_period = validity_period

    # Read accessors

    def get_by_id(self, record_id: UUID) -> Optional[RevocationRecord]:
        """Get a revocation record by id."""
        return self.ledger.find_by_id(record_id)

    def get_by_serial(self, serial_number: int) -> Optional[RevocationRecord]:
        """Get the revocation record for a serial number, if revoked."""
        return self.ledger.find_by_serial(serial_number)

    def get_all(self) -> list[RevocationRecord]:
        """List all revocation records."""
        return self.ledger.find_all()

    def get_all_by_revoker(self, admin_id: UUID) -> list[RevocationRecord]:
        """List the revocation records created by one admin."""
        return self.ledger.find_all_by_revoker(admin_id)

    # Status decision

    def check(
        self,
        certificate: Optional[x509.Certificate],
        issuer: Optional[x509.Certificate],
    ) -> RevocationStatus:
        """Decide the revocation status of a certificate.

        A ledger record wins over every other check, so a revoked certificate
        is reported REVOKED even if its issuer field is inconsistent.

        Args:
            certificate: Certificate to check
            issuer: Certificate claimed to have issued it

        Returns:
            REVOKED if the serial number is in the ledger, UNKNOWN if either
            argument is absent or the issuer does not match or cannot be
            resolved, GOOD otherwise
        """
        try:
            self._assert_present(certificate, issuer)
        except MissingCertificateError as e:
            log.warning("Status check rejected: %s", e)
            return RevocationStatus.UNKNOWN

        if self.ledger.find_by_serial(certificate.serial_number) is not None:
            return RevocationStatus.REVOKED

        try:
            self.assert_issuer(certificate, issuer)
        except (IssuerMismatchError, IssuerNotFoundError) as e:
            log.warning("Serial %x: %s", certificate.serial_number, e)
            return RevocationStatus.UNKNOWN

        return RevocationStatus.GOOD

    def _assert_present(
        self,
        certificate: Optional[x509.Certificate],
        issuer: Optional[x509.Certificate],
    ) -> None:
        if certificate is None:
            raise MissingCertificateError("Certificate is absent")
        if issuer is None:
            raise MissingCertificateError("Issuer certificate is absent")

    def assert_issuer(self, certificate: x509.Certificate, issuer: x509.Certificate) -> None:
        """Check that issuer is the CA named by certificate.

        Raises:
            IssuerMismatchError: If the certificate names a different issuer
            IssuerNotFoundError: If the issuer is not in any CA pool
        """
        issuer_name = identity_of(issuer.subject)

        if identity_of(certificate.issuer) != issuer_name:
            raise IssuerMismatchError(
                f"Issuer mismatch: certificate names {identity_of(certificate.issuer)!r}, "
                f"claimed issuer is {issuer_name!r}"
            )

        if self.locator.find_ca_certificate(issuer_name) is None:
            raise IssuerNotFoundError(f"Issuer not found in CA pools: {issuer_name!r}")

    # State changes

    def revoke(
        self, certificate: Optional[x509.Certificate], admin_id: UUID
    ) -> RevocationStatus:
        """Revoke a certificate on behalf of an admin.

        Revoking an already revoked certificate leaves the existing record in
        place and still reports REVOKED.

        Args:
            certificate: Certificate to revoke
            admin_id: Admin performing the revocation

        Returns:
            REVOKED on success, UNKNOWN if the certificate is absent or the
            admin does not resolve
        """
        if certificate is None:
            log.warning("Revoke rejected: certificate is absent")
            return RevocationStatus.UNKNOWN

        try:
            self._require_admin(admin_id)
        except UnauthorizedError as e:
            log.warning("Revoke of serial %x rejected: %s", certificate.serial_number, e)
            return RevocationStatus.UNKNOWN

        serial_number = certificate.serial_number
        with self.ledger.serial_lock(serial_number):
            if self.ledger.find_by_serial(serial_number) is None:
                self.ledger.insert(
                    RevocationRecord(
                        serial_number=serial_number,
                        issuer=identity_of(certificate.issuer),
                        email=email_from_name(identity_of(certificate.subject)),
                        revoker=admin_id,
                    )
                )
            else:
                log.debug("Serial %x already revoked", serial_number)

        return RevocationStatus.REVOKED

    def activate(
        self, certificate: Optional[x509.Certificate], admin_id: UUID
    ) -> RevocationStatus:
        """Reinstate a revoked certificate.

        Only the admin who revoked the certificate may reinstate it.

        Args:
            certificate: Certificate to reinstate
            admin_id: Admin requesting the reinstatement

        Returns:
            GOOD if the record was removed, UNKNOWN otherwise
        """
        if certificate is None:
            log.warning("Activate rejected: certificate is absent")
            return RevocationStatus.UNKNOWN

        serial_number = certificate.serial_number
        with self.ledger.serial_lock(serial_number):
            try:
                record = self._require_record(serial_number)
                self._require_admin(admin_id)
                if record.revoker != admin_id:
                    raise NotRevokerError(
                        f"Admin {admin_id} did not revoke serial {serial_number:x}"
                    )
            except (RecordNotFoundError, UnauthorizedError) as e:
                log.warning("Activate of serial %x rejected: %s", serial_number, e)
                return RevocationStatus.UNKNOWN

            self.ledger.delete_by_id(record.id)

        return RevocationStatus.GOOD

    def _require_admin(self, admin_id: UUID) -> AdminIdentity:
        admin = self.admins.find_one_by_id(admin_id)
        if admin is None:
            raise UnknownAdminError(f"Unknown admin: {admin_id}")
        return admin

    def _require_record(self, serial_number: int) -> RevocationRecord:
        record = self.ledger.find_by_serial(serial_number)
        if record is None:
            raise RecordNotFoundError(f"Serial {serial_number:x} is not revoked")
        return record

    # Reporting

    def status_report(
        self,
        certificate: Optional[x509.Certificate],
        issuer: Optional[x509.Certificate],
    ) -> dict:
        """Build an OCSP-style status document for a certificate.

        Args:
            certificate: Certificate to check
            issuer: Certificate claimed to have issued it

        Returns:
            Dictionary with status and response timing data
        """
        status = self.check(certificate, issuer)
        now = current_time()
        next_update = now + timedelta(seconds=self.validity_period)

        report = {
            "serial_number": (
                format(certificate.serial_number, "x") if certificate is not None else None
            ),
            "status": status.value,
            "produced_at": now.isoformat(),
            "this_update": now.isoformat(),
            "next_update": next_update.isoformat(),
        }

        if status == RevocationStatus.REVOKED:
            record = self.ledger.find_by_serial(certificate.serial_number)
            if record is not None:
                report["revocation_time"] = record.revoked_at.isoformat()
                report["revoker"] = str(record.revoker)

        return report
