"""Configuration loading and component wiring."""

from pathlib import Path
from typing import Literal, NamedTuple, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.errors import ConfigurationError
from .core.models import AdminIdentity
from .core.names import EmailIdentityMatcher, ExactNameMatcher
from .ledger.admins import InMemoryAdminDirectory
from .ledger.ledger import RevocationLedger
from .ledger.store import InMemoryRevocationStore, YamlRevocationStore
from .responder.ocsp import OCSPService
from .trust.locator import CertificateLocator
from .trust.store import FileKeyStoreReader
from .validator.chain import DEFAULT_MAX_CHAIN_DEPTH, ChainValidator


class Settings(BaseModel):
    """open-cert-status configuration."""

    version: str = Field(default="1.0")
    keystores: dict[str, Path] = Field(
        default_factory=dict, description="Pool name to key-store file"
    )
    keystore_password: Optional[str] = Field(
        default=None, description="Credential passed to the key-store reader"
    )
    max_chain_depth: int = Field(
        default=DEFAULT_MAX_CHAIN_DEPTH, ge=1, description="Chain walk bound"
    )
    response_validity: int = Field(
        default=86400, ge=0, description="Status report validity (seconds)"
    )
    name_matching: Literal["email", "exact"] = Field(
        default="email", description="Subject matching rule"
    )
    ledger_path: Optional[Path] = Field(
        default=None, description="YAML ledger file, in-memory when unset"
    )
    admins: list[AdminIdentity] = Field(default_factory=list)

    @classmethod
    def from_config(cls, config_path: str | Path) -> "Settings":
        """Load settings from a YAML configuration file.

        Relative key-store and ledger paths are resolved against the config
        file's directory.

        Args:
            config_path: Path to YAML config file

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If config file cannot be loaded or validated
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            settings = cls.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise ConfigurationError(f"Failed to load config: {e}")

        base_dir = config_path.parent
        settings.keystores = {
            name: path if path.is_absolute() else base_dir / path
            for name, path in settings.keystores.items()
        }
        if settings.ledger_path is not None and not settings.ledger_path.is_absolute():
            settings.ledger_path = base_dir / settings.ledger_path
        return settings


class Components(NamedTuple):
    """Wired-up services built from Settings."""

    locator: CertificateLocator
    ledger: RevocationLedger
    admins: InMemoryAdminDirectory
    service: OCSPService
    validator: ChainValidator


def build_components(settings: Settings) -> Components:
    """Build the locator, ledger, OCSP service and chain validator.

    Args:
        settings: Loaded settings

    Returns:
        Components tuple
    """
    matcher = ExactNameMatcher() if settings.name_matching == "exact" else EmailIdentityMatcher()
    locator = CertificateLocator(
        FileKeyStoreReader(settings.keystores),
        credential=settings.keystore_password,
        matcher=matcher,
    )

    if settings.ledger_path is not None:
        store = YamlRevocationStore(settings.ledger_path)
    else:
        store = InMemoryRevocationStore()
    ledger = RevocationLedger(store)

    admins = InMemoryAdminDirectory(settings.admins)
    service = OCSPService(
        ledger, locator, admins, validity_period=settings.response_validity
    )
    validator = ChainValidator(locator, service, max_depth=settings.max_chain_depth)
    return Components(locator, ledger, admins, service, validator)
