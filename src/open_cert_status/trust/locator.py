"""Certificate lookup across the intermediate, root and end-user pools."""

import logging
from collections.abc import Sequence
from typing import Optional

from cryptography import x509

from ..core.names import EmailIdentityMatcher, IdentityMatcher
from .store import CA_POOLS, END_USER_POOL, KeyStoreReader

log = logging.getLogger(__name__)


class CertificateLocator:
    """Finds certificates by subject identity in named key-store pools."""

    def __init__(
        self,
        reader: KeyStoreReader,
        credential: Optional[str] = None,
        matcher: Optional[IdentityMatcher] = None,
    ):
        """Initialize locator.

        Args:
            reader: Key-store reader supplying the pools
            credential: Credential passed to the reader for every pool
            matcher: Subject matching rule (default: e-mail address equality)
        """
        self.reader = reader
        self.credential = credential
        self.matcher = matcher or EmailIdentityMatcher()

    def locate_issuer_by_identity(
        self, identity: Optional[str], pools: Sequence[str]
    ) -> Optional[x509.Certificate]:
        """Search pools in order for a certificate matching an identity.

        Args:
            identity: Subject identifier string of the wanted certificate
            pools: Pool names, searched in the given order

        Returns:
            The first matching certificate, None if no pool yields one
        """
        if not identity:
            return None

        for pool_name in pools:
            for certificate in self.reader.read_all_certificates(
                pool_name, self.credential
            ):
                if self.matcher.matches(identity, certificate):
                    return certificate

        log.debug("No certificate for %r in pools %s", identity, list(pools))
        return None

    def find_ca_certificate(self, identity: Optional[str]) -> Optional[x509.Certificate]:
        """Find a CA certificate, searching intermediates before roots."""
        return self.locate_issuer_by_identity(identity, CA_POOLS)

    def find_end_entity_certificate(
        self, identity: Optional[str]
    ) -> Optional[x509.Certificate]:
        """Find an end-user certificate by subject identity."""
        return self.locate_issuer_by_identity(identity, (END_USER_POOL,))
