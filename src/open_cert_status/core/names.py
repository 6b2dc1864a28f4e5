"""Distinguished-name helpers used to correlate certificates across key stores.

Certificates are matched by the e-mail address embedded in their subject name
rather than by key identifier. The matching rule lives behind the matcher
classes below so a structured identifier can replace it later.
"""

from typing import Optional, Protocol

from cryptography import x509
from cryptography.x509.oid import NameOID

EMAIL_ATTRIBUTE = "EMAILADDRESS"

_EMAIL_ALIASES = {
    EMAIL_ATTRIBUTE,
    "EMAIL",
    "E",
    NameOID.EMAIL_ADDRESS.dotted_string,
}


def identity_of(name: x509.Name) -> str:
    """Render an X.509 name as an identifier string.

    Args:
        name: Subject or issuer name

    Returns:
        RFC 4514 string with the e-mail attribute spelled EMAILADDRESS
    """
    return name.rfc4514_string({NameOID.EMAIL_ADDRESS: EMAIL_ATTRIBUTE})


def email_from_name(name: Optional[str]) -> Optional[str]:
    """Extract the e-mail address from a distinguished-name string.

    Args:
        name: Identifier string such as "EMAILADDRESS=ca@example.com,CN=CA"

    Returns:
        The first e-mail address found, None if the name carries none
    """
    if not name:
        return None

    for component in name.split(","):
        attr_type, sep, value = component.strip().partition("=")
        if not sep:
            continue
        if attr_type.strip().upper() in _EMAIL_ALIASES:
            value = value.strip()
            return value or None

    return None


class IdentityMatcher(Protocol):
    """Decides whether a certificate subject matches a target identity."""

    def matches(self, identity: str, certificate: x509.Certificate) -> bool: ...


class EmailIdentityMatcher:
    """Matches certificates whose subject e-mail equals the target's."""

    def matches(self, identity: str, certificate: x509.Certificate) -> bool:
        target = email_from_name(identity)
        if target is None:
            return False
        return email_from_name(identity_of(certificate.subject)) == target


class ExactNameMatcher:
    """Matches certificates whose full subject identifier equals the target."""

    def matches(self, identity: str, certificate: x509.Certificate) -> bool:
        return identity_of(certificate.subject) == identity
