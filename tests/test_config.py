"""Tests for loading the vault registry from YAML."""

import pytest

from obsidian_tags.config import load_vault_configuration


def _write_config(tmp_path, text):
    config_path = tmp_path / "vaults.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_load_valid_configuration(tmp_path):
    vault_dir = tmp_path / "notes"
    vault_dir.mkdir()
    config_path = _write_config(
        tmp_path,
        f"default: personal\nvaults:\n  personal:\n    path: {vault_dir}\n    description: '  Mine  '\n",
    )

    configuration = load_vault_configuration(config_path)
    vault = configuration.get("personal")

    assert configuration.default_vault == "personal"
    assert vault.path == vault_dir.resolve()
    assert vault.description == "Mine"
    assert vault.exists is True
    assert configuration.as_payload()["vaults"][0]["name"] == "personal"


def test_nonexistent_vault_path_still_loads(tmp_path):
    config_path = _write_config(
        tmp_path,
        f"default: gone\nvaults:\n  gone:\n    path: {tmp_path / 'missing'}\n",
    )
    assert load_vault_configuration(config_path).get("gone").exists is False


def test_unknown_vault_name(tmp_path):
    config_path = _write_config(tmp_path, f"default: a\nvaults:\n  a:\n    path: {tmp_path}\n")
    with pytest.raises(ValueError, match="Unknown vault 'b'"):
        load_vault_configuration(config_path).get("b")


def test_missing_configuration_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_vault_configuration(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "default: a\n",
        "default: a\nvaults: {}\n",
        "default: a\nvaults:\n  a: not-a-mapping\n",
        "default: a\nvaults:\n  a:\n    description: no path\n",
        "default: b\nvaults:\n  a:\n    path: /tmp\n",
    ],
)
def test_invalid_configuration(tmp_path, text):
    with pytest.raises(ValueError):
        load_vault_configuration(_write_config(tmp_path, text))
