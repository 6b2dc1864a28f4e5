#!/usr/bin/env python3
"""
OCSP-style revocation example.

Builds a root -> intermediate -> end-user chain, validates it, revokes the
end-user certificate and reinstates it again.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from open_cert_status import (
    CertificateLocator,
    ChainValidator,
    InMemoryAdminDirectory,
    InMemoryKeyStoreReader,
    OCSPService,
    RevocationLedger,
)
from open_cert_status.trust import END_USER_POOL, INTERMEDIATE_POOL, ROOT_POOL


def make_certificate(email, common_name, issuer_name, public_key, signing_key):
    subject = x509.Name(
        [
            x509.NameAttribute(NameOID.EMAIL_ADDRESS, email),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name or subject)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(hours=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(signing_key, hashes.SHA256())
    )
    return certificate


def main():
    print("=== OCSP Revocation Example ===\n")

    # ========================================================================
    # STEP 1: Build a certificate hierarchy
    # ========================================================================
    print("1. Building certificate hierarchy...")
    root_key = ec.generate_private_key(ec.SECP256R1())
    issuing_key = ec.generate_private_key(ec.SECP256R1())
    user_key = ec.generate_private_key(ec.SECP256R1())

    root = make_certificate(
        "root@ca.example.com", "Example Root CA", None, root_key.public_key(), root_key
    )
    intermediate = make_certificate(
        "issuing@ca.example.com",
        "Example Issuing CA",
        root.subject,
        issuing_key.public_key(),
        root_key,
    )
    user = make_certificate(
        "alice@example.com", "Alice", intermediate.subject, user_key.public_key(), issuing_key
    )
    print(f"   ✓ Root:         {root.subject.rfc4514_string()}")
    print(f"   ✓ Intermediate: {intermediate.subject.rfc4514_string()}")
    print(f"   ✓ End user:     serial {user.serial_number:x}\n")

    # ========================================================================
    # STEP 2: Wire the OCSP service and chain validator
    # ========================================================================
    print("2. Setting up OCSP service...")
    reader = InMemoryKeyStoreReader(
        {INTERMEDIATE_POOL: [intermediate], ROOT_POOL: [root], END_USER_POOL: [user]}
    )
    locator = CertificateLocator(reader)
    admins = InMemoryAdminDirectory()
    admin_id = uuid4()
    admins.add_admin(admin_id, name="Security Officer")

    service = OCSPService(RevocationLedger(), locator, admins)
    validator = ChainValidator(locator, service)
    print(f"   ✓ Admin registered: {admin_id}\n")

    # ========================================================================
    # STEP 3: Validate the chain
    # ========================================================================
    print("3. Validating chain...")
    result = validator.validate(user)
    print(f"   ✓ Trusted: {result.trusted} (depth {result.depth})\n")

    # ========================================================================
    # STEP 4: Revoke the end-user certificate
    # ========================================================================
    print("4. Revoking end-user certificate...")
    status = service.revoke(user, admin_id)
    report = service.status_report(user, intermediate)
    print(f"   ✓ Status: {status.value}")
    print(f"   ✓ Revoked At: {report['revocation_time']}")
    print(f"   ✓ Trusted: {validator.is_chain_trusted(user)}\n")

    # ========================================================================
    # STEP 5: Another admin tries to reinstate
    # ========================================================================
    print("5. Reinstating with a different admin...")
    other_admin = uuid4()
    admins.add_admin(other_admin, name="Someone Else")
    print(f"   ✗ Status: {service.activate(user, other_admin).value}\n")

    # ========================================================================
    # STEP 6: Original admin reinstates
    # ========================================================================
    print("6. Reinstating with the revoking admin...")
    print(f"   ✓ Status: {service.activate(user, admin_id).value}")
    print(f"   ✓ Trusted: {validator.is_chain_trusted(user)}\n")

    print("=== Example Complete ===")


if __name__ == "__main__":
    main()
