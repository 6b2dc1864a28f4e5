"""Key-store readers supplying the named certificate pools."""

import logging
import threading
from pathlib import Path
from typing import Optional, Protocol

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from ..core.errors import KeyStoreError

log = logging.getLogger(__name__)

INTERMEDIATE_POOL = "intermediate"
ROOT_POOL = "root"
END_USER_POOL = "end-user"

# Order in which CA pools are searched for issuers
CA_POOLS = (INTERMEDIATE_POOL, ROOT_POOL)

_PKCS12_SUFFIXES = {".p12", ".pfx"}


class KeyStoreReader(Protocol):
    """Reads every certificate held in a named pool."""

    def read_all_certificates(
        self, pool_name: str, credential: Optional[str] = None
    ) -> list[x509.Certificate]: ...


class InMemoryKeyStoreReader:
    """Key-store reader backed by in-memory certificate lists."""

    def __init__(self, pools: Optional[dict[str, list[x509.Certificate]]] = None):
        """Initialize the reader.

        Args:
            pools: Optional mapping of pool name to certificates
        """
        self._lock = threading.Lock()
        self._pools: dict[str, list[x509.Certificate]] = {
            name: list(certs) for name, certs in (pools or {}).items()
        }

    def add_certificate(self, pool_name: str, certificate: x509.Certificate) -> None:
        """Append a certificate to a pool, creating the pool if needed."""
        with self._lock:
            self._pools.setdefault(pool_name, []).append(certificate)

    def remove_certificate(self, pool_name: str, certificate: x509.Certificate) -> None:
        """Remove a certificate from a pool if present."""
        with self._lock:
            pool = self._pools.get(pool_name, [])
            if certificate in pool:
                pool.remove(certificate)

    def list_pools(self) -> list[str]:
        """List the names of all pools, including empty ones."""
        with self._lock:
            return list(self._pools)

    def read_all_certificates(
        self, pool_name: str, credential: Optional[str] = None
    ) -> list[x509.Certificate]:
        """Return a snapshot of the pool's certificates.

        The credential is accepted for interface compatibility and ignored.
        """
        with self._lock:
            return list(self._pools.get(pool_name, []))


class FileKeyStoreReader:
    """Key-store reader backed by PEM bundles or PKCS#12 files."""

    def __init__(self, paths: dict[str, str | Path]):
        """Initialize the reader.

        Args:
            paths: Mapping of pool name to key-store file. Files ending in
                .p12 or .pfx are read as PKCS#12, anything else as PEM
                (or a single DER certificate)
        """
        self._paths = {name: Path(path) for name, path in paths.items()}

    @property
    def paths(self) -> dict[str, Path]:
        """Mapping of pool name to key-store file."""
        return dict(self._paths)

    def read_all_certificates(
        self, pool_name: str, credential: Optional[str] = None
    ) -> list[x509.Certificate]:
        """Read every certificate stored for a pool.

        Args:
            pool_name: Pool to read ("intermediate", "root" or "end-user")
            credential: Password for PKCS#12 key stores

        Returns:
            Certificates in file order; empty if the pool is not configured

        Raises:
            KeyStoreError: If the key store file is missing or unreadable
        """
        path = self._paths.get(pool_name)
        if path is None:
            log.debug("No key store configured for pool %r", pool_name)
            return []

        if not path.exists():
            raise KeyStoreError(f"Key store not found: {path}")

        try:
            data = path.read_bytes()
            if path.suffix.lower() in _PKCS12_SUFFIXES:
                return self._read_pkcs12(data, credential)
            if b"-----BEGIN" in data:
                return x509.load_pem_x509_certificates(data)
            return [x509.load_der_x509_certificate(data)]
        except KeyStoreError:
            raise
        except Exception as e:
            raise KeyStoreError(f"Failed to read key store {path}: {e}")

    @staticmethod
    def _read_pkcs12(data: bytes, credential: Optional[str]) -> list[x509.Certificate]:
        password = credential.encode("utf-8") if credential else None
        bundle = pkcs12.load_pkcs12(data, password)
        certificates = []
        if bundle.cert is not None:
            certificates.append(bundle.cert.certificate)
        certificates.extend(extra.certificate for extra in bundle.additional_certs)
        return certificates
