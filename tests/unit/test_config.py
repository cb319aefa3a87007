"""Unit tests for config.py"""

import pytest

from mdfolio.config import Settings, dump_defaults, load_config


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults():
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.required_keys == ["layout"]
    assert settings.permalink_style == "date"
    assert settings.duplicate_policy == "reject"
    assert settings.target == "jekyll"


def test_load_config_reads_config_yaml(tmp_path):
    """Values in config.yaml replace the defaults."""
    (tmp_path / "config.yaml").write_text("permalink_style: pretty\nlayouts: [page, post]\n")
    settings = load_config()
    assert settings.permalink_style == "pretty"
    assert settings.layouts == ["page", "post"]


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDFOLIO_OUTPUT_DIR takes precedence over config.yaml output_dir."""
    (tmp_path / "config.yaml").write_text("output_dir: from-yaml\n")
    monkeypatch.setenv("MDFOLIO_OUTPUT_DIR", "from-env")
    assert load_config().output_dir == "from-env"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDFOLIO_TARGET", "hugo")
    assert load_config(overrides={"target": "jekyll"}).target == "jekyll"
    assert load_config(overrides={"target": None}).target == "hugo"


def test_load_config_env_list_field(monkeypatch):
    """List fields read from the environment are comma-separated."""
    monkeypatch.setenv("MDFOLIO_REQUIRED_KEYS", "layout, title")
    assert load_config().required_keys == ["layout", "title"]


def test_load_config_env_bool_field(monkeypatch):
    """MDFOLIO_INCLUDE_DRAFTS is coerced to bool."""
    monkeypatch.setenv("MDFOLIO_INCLUDE_DRAFTS", "true")
    assert load_config().include_drafts is True


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    """A config.yaml holding a list is rejected."""
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


@pytest.mark.parametrize("style", ["date", "pretty", "ordinal", "none", "/blog/:title/"])
def test_permalink_style_accepted(style):
    assert Settings(permalink_style=style).permalink_style == style


def test_permalink_style_rejected():
    """Unknown style names fail validation (pydantic errors are ValueErrors)."""
    with pytest.raises(ValueError, match="unknown permalink style"):
        Settings(permalink_style="weekly")


def test_duplicate_policy_rejected():
    with pytest.raises(ValueError):
        load_config(overrides={"duplicate_policy": "merge"})


def test_dump_defaults_round_trips(tmp_path):
    """dump_defaults() output loads back to the default settings."""
    (tmp_path / "config.yaml").write_text(dump_defaults())
    assert load_config() == Settings()
