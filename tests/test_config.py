"""Tests for configuration discovery and validation."""

import pytest

from gostub.config import ConfigError, StubConfig, find_config, load_config, load_config_file
from gostub.quickfix import NamingPolicy


def test_defaults_without_config(tmp_path):
    config = load_config(tmp_path)
    assert config == StubConfig()
    assert config.naming_policy is NamingPolicy.IDENTIFIER
    assert config.use_color is None


def test_gostub_toml(tmp_path):
    (tmp_path / "gostub.toml").write_text('naming = "unwrap"\ncolor = false\n')
    config = load_config(tmp_path)
    assert config.naming_policy is NamingPolicy.UNWRAP
    assert config.use_color is False
    assert config.source == tmp_path / "gostub.toml"


def test_pyproject_tool_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.gostub]\nnaming = "type"\n')
    assert load_config(tmp_path).naming_policy is NamingPolicy.TYPE


def test_pyproject_without_table_is_skipped(tmp_path):
    (tmp_path / "gostub.toml").write_text('naming = "type"\n')
    nested = tmp_path / "service"
    nested.mkdir()
    (nested / "pyproject.toml").write_text('[project]\nname = "x"\n')
    assert find_config(nested) == (tmp_path / "gostub.toml").resolve()


def test_nearest_config_wins(tmp_path):
    (tmp_path / "gostub.toml").write_text('naming = "type"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    (tmp_path / "a" / "gostub.toml").write_text('naming = "unwrap"\n')
    assert load_config(nested).naming_policy is NamingPolicy.UNWRAP


def test_gostub_toml_preferred_over_pyproject(tmp_path):
    (tmp_path / "gostub.toml").write_text('naming = "unwrap"\n')
    (tmp_path / "pyproject.toml").write_text('[tool.gostub]\nnaming = "type"\n')
    assert load_config(tmp_path).naming_policy is NamingPolicy.UNWRAP


def test_defaults_to_current_directory(tmp_path, monkeypatch):
    (tmp_path / "gostub.toml").write_text('naming = "type"\n')
    monkeypatch.chdir(tmp_path)
    assert load_config().naming_policy is NamingPolicy.TYPE


@pytest.mark.parametrize("text, reason", [
    ('naming = "fancy"\n', "naming must be one of identifier, unwrap, type, not 'fancy'"),
    ('color = "yes"\n', "color must be true or false"),
    ('colour = true\n', "unknown key 'colour'"),
])
def test_invalid_values(tmp_path, text, reason):
    (tmp_path / "gostub.toml").write_text(text)
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path)
    assert info.value.code == "GS4001"
    assert str(info.value).endswith(reason)


def test_malformed_toml(tmp_path):
    (tmp_path / "gostub.toml").write_text("naming = \n")
    with pytest.raises(ConfigError, match="invalid configuration"):
        load_config(tmp_path)


def test_pyproject_with_scalar_tool_is_skipped(tmp_path):
    (tmp_path / "pyproject.toml").write_text('tool = 1\n')
    assert find_config(tmp_path) is None
    assert load_config(tmp_path) == StubConfig()
    with pytest.raises(ConfigError, match=r"\[tool.gostub\] must be a table"):
        load_config_file(tmp_path / "pyproject.toml")


def test_pyproject_scalar_gostub_entry(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[tool]\ngostub = "type"\n')
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path)
    assert info.value.code == "GS4001"
    assert str(info.value).endswith("[tool.gostub] must be a table")
