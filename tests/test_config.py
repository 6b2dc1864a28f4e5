"""Tests for configuration loading and component wiring."""

from uuid import uuid4

import pytest
import yaml
from cryptography.hazmat.primitives import serialization

from open_cert_status import Settings, build_components
from open_cert_status.core.errors import ConfigurationError
from open_cert_status.core.models import RevocationStatus
from open_cert_status.core.names import ExactNameMatcher


def _write_pem(path, *certificates):
    path.write_bytes(
        b"".join(c.public_bytes(serialization.Encoding.PEM) for c in certificates)
    )


@pytest.fixture
def config_file(pki, tmp_path):
    """A config directory with PEM key stores, one admin and a YAML ledger."""
    certs = tmp_path / "certs"
    certs.mkdir()
    _write_pem(certs / "intermediate.pem", pki.intermediate)
    _write_pem(certs / "root.pem", pki.root)
    _write_pem(certs / "end-user.pem", pki.leaf)

    config = {
        "keystores": {
            "intermediate": "certs/intermediate.pem",
            "root": "certs/root.pem",
            "end-user": "certs/end-user.pem",
        },
        "keystore_password": "admin",
        "max_chain_depth": 5,
        "response_validity": 3600,
        "ledger_path": "ledger.yaml",
        "admins": [{"id": str(pki.admin_id), "name": "Alice Admin"}],
    }
    path = tmp_path / "open-cert-status.yaml"
    path.write_text(yaml.safe_dump(config))
    return path


def test_settings_from_config(config_file):
    """Test settings load with paths resolved against the config directory."""
    settings = Settings.from_config(config_file)

    assert settings.max_chain_depth == 5
    assert settings.response_validity == 3600
    assert settings.name_matching == "email"
    assert settings.keystores["root"] == config_file.parent / "certs" / "root.pem"
    assert settings.ledger_path == config_file.parent / "ledger.yaml"
    assert len(settings.admins) == 1


def test_build_components(pki, config_file):
    """Test wired components validate, revoke and persist."""
    components = build_components(Settings.from_config(config_file))

    assert components.validator.max_depth == 5
    assert components.service.validity_period == 3600
    assert components.validator.is_chain_trusted(pki.leaf)

    leaf = components.locator.find_end_entity_certificate("EMAILADDRESS=alice@example.com")
    assert leaf == pki.leaf
    assert components.service.revoke(leaf, pki.admin_id) == RevocationStatus.REVOKED
    assert not components.validator.is_chain_trusted(leaf)

    reloaded = build_components(Settings.from_config(config_file))
    assert reloaded.service.get_by_serial(leaf.serial_number) is not None
    assert reloaded.service.revoke(leaf, uuid4()) == RevocationStatus.UNKNOWN


def test_exact_name_matching(config_file):
    """Test name_matching selects the stricter matcher."""
    data = yaml.safe_load(config_file.read_text())
    data["name_matching"] = "exact"
    config_file.write_text(yaml.safe_dump(data))

    components = build_components(Settings.from_config(config_file))
    assert isinstance(components.locator.matcher, ExactNameMatcher)


def test_in_memory_ledger_by_default(pki, tmp_path):
    """Test an empty config gives an in-memory ledger and default depth."""
    path = tmp_path / "empty.yaml"
    path.write_text("")

    components = build_components(Settings.from_config(path))
    assert components.validator.max_depth == 10
    assert components.service.get_all() == []
    assert not components.validator.is_chain_trusted(pki.leaf)


def test_missing_config(tmp_path):
    """Test a missing file raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        Settings.from_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "max_chain_depth: 0\n",
        "name_matching: fuzzy\n",
        "admins: [{name: no-id}]\n",
        "keystores: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    """Test invalid settings raise ConfigurationError."""
    path = tmp_path / "bad.yaml"
    path.write_text(content)

    with pytest.raises(ConfigurationError):
        Settings.from_config(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
