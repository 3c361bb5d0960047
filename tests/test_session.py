"""Tests for per-session active vault selection."""

from types import SimpleNamespace

import pytest

from obsidian_tags import session
from obsidian_tags.data_models import VaultConfiguration, VaultMetadata


@pytest.fixture
def configuration(tmp_path, monkeypatch):
    vaults = {
        name: VaultMetadata(name=name, path=tmp_path / name, description="", exists=False)
        for name in ("personal", "work")
    }
    configuration = VaultConfiguration(default_vault="personal", vaults=vaults)
    monkeypatch.setattr(session, "get_vault_configuration", lambda: configuration)
    monkeypatch.setattr(session, "_ACTIVE_VAULTS", {})
    return configuration


def _context():
    return SimpleNamespace(session=object())


def test_default_vault_without_context(configuration):
    assert session.resolve_vault(None).name == "personal"


def test_explicit_vault_wins(configuration):
    ctx = _context()
    session.set_active_vault(ctx, "personal")
    assert session.resolve_vault("work", ctx).name == "work"


def test_active_vault_is_per_session(configuration):
    first, second = _context(), _context()
    session.set_active_vault(first, "work")

    assert session.resolve_vault(None, first).name == "work"
    assert session.resolve_vault(None, second).name == "personal"


def test_unknown_vault_is_rejected(configuration):
    with pytest.raises(ValueError, match="Unknown vault"):
        session.set_active_vault(_context(), "missing")
    with pytest.raises(ValueError):
        session.resolve_vault("missing")
