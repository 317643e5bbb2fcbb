"""Tests for configuration loading and validation."""

import pytest

from biogloss.core.config import DICT_ENDPOINT, AnnotationConfig, APIConfig, BioGlossConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BIOGLOSS_DICTIONARY_MODE", "BIOGLOSS_SCIENTIFIC", "BIOGLOSS_SIMPLE_ENGLISH",
                 "BIOGLOSS_DICT_ENDPOINT", "BIOGLOSS_LOOKUP_TIMEOUT", "BIOGLOSS_CATALOG", "BIOGLOSS_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = BioGlossConfig()
    assert config.annotation.dictionary_mode == "combined"
    assert config.annotation.scientific_enabled
    assert not config.annotation.simple_english_enabled
    assert config.api.dict_endpoint == DICT_ENDPOINT
    assert config.api.lookup_timeout == 5.0


def test_unknown_dictionary_mode_rejected():
    with pytest.raises(ValueError):
        AnnotationConfig(dictionary_mode="astronomy")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BIOGLOSS_DICTIONARY_MODE", "genetics")
    monkeypatch.setenv("BIOGLOSS_SCIENTIFIC", "false")
    monkeypatch.setenv("BIOGLOSS_SIMPLE_ENGLISH", "yes")
    monkeypatch.setenv("BIOGLOSS_LOOKUP_TIMEOUT", "2.5")
    monkeypatch.setenv("BIOGLOSS_DEBUG", "1")

    config = BioGlossConfig()
    assert config.annotation == AnnotationConfig("genetics", False, True)
    assert config.api.lookup_timeout == 2.5
    assert config.log_level == "DEBUG"


def test_save_and_load_roundtrip(tmp_path):
    path = tmp_path / "settings.yaml"
    original = BioGlossConfig(
        annotation=AnnotationConfig("chemistry", True, True),
        api=APIConfig(lookup_timeout=3.0),
        catalog_path="custom.yaml",
    )
    original.save_to_file(str(path))

    loaded = BioGlossConfig.load_from_file(str(path))
    assert loaded.annotation == original.annotation
    assert loaded.api.lookup_timeout == 3.0
    assert loaded.catalog_path == "custom.yaml"


def test_load_rejects_unknown_keys(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("annotation:\n  colour: blue\n", encoding="utf-8")
    with pytest.raises(ValueError):
        BioGlossConfig.load_from_file(str(path))
