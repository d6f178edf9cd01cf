"""
Tests for locale config loading and the per-loader cache.
"""

import json
from pathlib import Path

import pytest
from eligibility.loader import (
    DEFAULT_LOGIC_FILES,
    ConfigLoadError,
    ConfigLoader,
    load_config_file,
)
from eligibility.examples import build_example_config
from eligibility.serialization import config_to_dict, config_to_yaml

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_bundled_en_us_matches_example():
    config = load_config_file(DATA_DIR / "logic_en_US.json")
    assert config.source == "logic_en_US.json"
    assert config_to_dict(config) == config_to_dict(build_example_config())


def test_load_yaml(tmp_path):
    path = tmp_path / "logic_en_GB.yaml"
    path.write_text(config_to_yaml(build_example_config()), encoding="utf-8")
    config = load_config_file(path)
    assert config.meta.language == "en_US"
    assert [r.id for r in config.vaccines] == ["flu", "covid", "rsv", "shingles"]


def test_missing_file(tmp_path):
    with pytest.raises(ConfigLoadError, match="not found"):
        load_config_file(tmp_path / "logic_xx_XX.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "logic_en_US.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="Error parsing"):
        load_config_file(path)


def test_non_object_document(tmp_path):
    path = _write_json(tmp_path / "logic_en_US.json", [1, 2, 3])
    with pytest.raises(ConfigLoadError):
        load_config_file(path)


def test_wrongly_typed_sections_load(tmp_path):
    path = _write_json(tmp_path / "logic_en_US.json", {"questions": {"age": {}}, "rules": ["flu"]})
    config = load_config_file(path)
    assert config.questions == []
    assert config.vaccines == []
    assert config.source == "logic_en_US.json"


def test_read_failure_becomes_load_error(tmp_path, monkeypatch):
    def fail(data, source=None):
        raise TypeError("unexpected value")

    monkeypatch.setattr("eligibility.loader.config_from_dict", fail)
    path = _write_json(tmp_path / "logic_en_US.json", {})
    with pytest.raises(ConfigLoadError, match="unexpected value"):
        load_config_file(path)


class TestConfigLoader:

    def test_default_locales(self):
        loader = ConfigLoader(DATA_DIR)
        assert loader.locales() == list(DEFAULT_LOGIC_FILES.keys())

    def test_unknown_locale(self):
        loader = ConfigLoader(DATA_DIR)
        with pytest.raises(ConfigLoadError, match="fr_FR"):
            loader.load("fr_FR")

    def test_load_is_cached_per_instance(self, tmp_path):
        path = _write_json(tmp_path / "logic_en_US.json", {"meta": {"version": "1"}})
        loader = ConfigLoader(tmp_path)

        first = loader.load("en_US")
        _write_json(path, {"meta": {"version": "2"}})
        assert loader.is_cached("en_US")
        assert loader.load("en_US") is first
        assert first.meta.version == "1"

        # another loader has its own cache
        assert ConfigLoader(tmp_path).load("en_US").meta.version == "2"

    def test_clear(self, tmp_path):
        path = _write_json(tmp_path / "logic_en_US.json", {"meta": {"version": "1"}})
        loader = ConfigLoader(tmp_path)
        loader.load("en_US")

        _write_json(path, {"meta": {"version": "2"}})
        loader.clear()

        assert not loader.is_cached("en_US")
        assert loader.load("en_US").meta.version == "2"

    def test_failed_load_is_not_cached(self, tmp_path):
        loader = ConfigLoader(tmp_path)
        with pytest.raises(ConfigLoadError):
            loader.load("en_US")
        assert not loader.is_cached("en_US")

    def test_discover(self, tmp_path):
        _write_json(tmp_path / "logic_en_US.json", {})
        (tmp_path / "logic_pt_BR.yaml").write_text("meta: {language: pt_BR}\n", encoding="utf-8")
        (tmp_path / "notes.json").write_text("{}", encoding="utf-8")

        loader = ConfigLoader.discover(tmp_path)

        assert loader.locales() == ["en_US", "pt_BR"]
        assert loader.path_for("pt_BR") == tmp_path / "logic_pt_BR.yaml"
        assert loader.load("pt_BR").meta.language == "pt_BR"

    def test_discover_bundled_data(self):
        loader = ConfigLoader.discover(DATA_DIR)
        assert loader.locales() == ["en_US", "es_AR"]
