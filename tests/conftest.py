"""Shared fixtures: a three-level EC certificate hierarchy."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519
from cryptography.x509.oid import NameOID

from open_cert_status.ledger import InMemoryAdminDirectory, RevocationLedger
from open_cert_status.responder import OCSPService
from open_cert_status.trust import (
    END_USER_POOL,
    INTERMEDIATE_POOL,
    ROOT_POOL,
    CertificateLocator,
    InMemoryKeyStoreReader,
)
from open_cert_status.validator import ChainValidator

ROOT_EMAIL = "root@ca.example.com"
INTERMEDIATE_EMAIL = "issuing@ca.example.com"
LEAF_EMAIL = "alice@example.com"


def make_name(email: str, common_name: str) -> x509.Name:
    return x509.Name(
        [
            x509.NameAttribute(NameOID.EMAIL_ADDRESS, email),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example"),
        ]
    )


def issue_certificate(
    subject: x509.Name,
    issuer: x509.Name,
    public_key,
    signing_key,
    not_before: Optional[datetime] = None,
    not_after: Optional[datetime] = None,
    ca: bool = True,
    serial_number: Optional[int] = None,
) -> x509.Certificate:
    """Build and sign a certificate for tests."""
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(public_key)
        .serial_number(serial_number or x509.random_serial_number())
        .not_valid_before(not_before or now - timedelta(days=1))
        .not_valid_after(not_after or now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
    )
    unhashed = (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)
    algorithm = None if isinstance(signing_key, unhashed) else hashes.SHA256()
    return builder.sign(signing_key, algorithm)


class PKI:
    """Root, intermediate and leaf certificates wired to an OCSP service."""

    def __init__(self):
        self.root_key = ec.generate_private_key(ec.SECP256R1())
        self.intermediate_key = ec.generate_private_key(ec.SECP256R1())
        self.leaf_key = ec.generate_private_key(ec.SECP256R1())

        self.root_name = make_name(ROOT_EMAIL, "Example Root CA")
        self.intermediate_name = make_name(INTERMEDIATE_EMAIL, "Example Issuing CA")
        self.leaf_name = make_name(LEAF_EMAIL, "Alice")

        self.root = issue_certificate(
            self.root_name, self.root_name, self.root_key.public_key(), self.root_key
        )
        self.intermediate = issue_certificate(
            self.intermediate_name,
            self.root_name,
            self.intermediate_key.public_key(),
            self.root_key,
        )
        self.leaf = issue_certificate(
            self.leaf_name,
            self.intermediate_name,
            self.leaf_key.public_key(),
            self.intermediate_key,
            ca=False,
        )

        self.reader = InMemoryKeyStoreReader(
            {
                INTERMEDIATE_POOL: [self.intermediate],
                ROOT_POOL: [self.root],
                END_USER_POOL: [self.leaf],
            }
        )

        self.admins = InMemoryAdminDirectory()
        self.admin_id = uuid4()
        self.other_admin_id = uuid4()
        self.admins.add_admin(self.admin_id, name="Alice Admin")
        self.admins.add_admin(self.other_admin_id, name="Bob Admin")

        self.locator = CertificateLocator(self.reader, credential="admin")
        self.ledger = RevocationLedger()
        self.service = OCSPService(self.ledger, self.locator, self.admins)
        self.validator = ChainValidator(self.locator, self.service)

    def reissue(self, hop: str, expired: bool = False, signing_key=None) -> x509.Certificate:
        """Replace the certificate at one hop, keeping its names and key.

        Args:
            hop: "leaf", "intermediate" or "root"
            expired: Give the new certificate a validity window in the past
            signing_key: Sign with this key instead of the real issuer key
        """
        now = datetime.now(timezone.utc)
        window = {}
        if expired:
            window = {
                "not_before": now - timedelta(days=30),
                "not_after": now - timedelta(days=1),
            }

        pool, subject, issuer, key, issuer_key, ca = {
            "root": (ROOT_POOL, self.root_name, self.root_name, self.root_key, self.root_key, True),
            "intermediate": (
                INTERMEDIATE_POOL,
                self.intermediate_name,
                self.root_name,
                self.intermediate_key,
                self.root_key,
                True,
            ),
            "leaf": (
                END_USER_POOL,
                self.leaf_name,
                self.intermediate_name,
                self.leaf_key,
                self.intermediate_key,
                False,
            ),
        }[hop]

        old = getattr(self, hop)
        new = issue_certificate(
            subject, issuer, key.public_key(), signing_key or issuer_key, ca=ca, **window
        )
        self.reader.remove_certificate(pool, old)
        self.reader.add_certificate(pool, new)
        setattr(self, hop, new)
        return new


@pytest.fixture
def pki():
    """Fresh certificate hierarchy with an empty ledger."""
    return PKI()
