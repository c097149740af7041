"""
Configuration loading tests.
"""

from pathlib import Path

import pytest
import yaml

from jobtrustscanner.analyze import CatalogError, TrustAnalyzer
from jobtrustscanner.config import (
    DEFAULT_CONFIG_PATH,
    TrustSettings,
    load_effective_settings,
    load_settings,
    parse_settings,
    resolve_config_path,
    save_settings,
)


SHIPPED_CONFIG = Path(__file__).parent.parent / "config" / "trust_rules.yaml"


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestLoadSettings:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="empty"):
            load_settings(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("weights: [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_settings(str(path))

    def test_overrides(self, tmp_path):
        path = write_yaml(tmp_path / "rules.yaml", {
            "weights": {"wire_transfer": 25},
            "disabled_rules": ["gift_cards"],
            "thresholds": {"caps_run_limit": 20, "detail_min_length": 400},
            "section_min_lengths": {"company_info": 500},
            "reasons_cap": 6,
        })
        settings = load_settings(path)
        assert settings.weights == {"wire_transfer": 25}
        assert settings.disabled_rules == ["gift_cards"]
        assert settings.caps_run_limit == 20
        assert settings.detail_min_length == 400
        assert settings.short_description_length == 120
        assert settings.reasons_cap == 6

        catalog = settings.build_catalog()
        assert catalog.weight_table()["wire_transfer"] == 25
        assert "gift_cards" not in catalog.weight_table()
        assert catalog.reasons_cap == 6

    def test_shipped_config_matches_defaults(self):
        settings = load_settings(str(SHIPPED_CONFIG))
        tuned = TrustAnalyzer(settings.build_catalog())
        assert tuned.catalog.weight_table() == TrustAnalyzer().catalog.weight_table()
        assert settings.reasons_cap == 8

    def test_bad_weight_fails_at_build(self, tmp_path):
        path = write_yaml(tmp_path / "rules.yaml", {"weights": {"wire_transfer": -3}})
        settings = load_settings(path)
        with pytest.raises(CatalogError):
            settings.build_catalog()


class TestParseSettings:

    @pytest.mark.parametrize("data", [
        ["not", "a", "mapping"],
        {"unknown_key": 1},
        {"weights": ["wire_transfer"]},
        {"thresholds": {"unknown_threshold": 3}},
        {"disabled_rules": "wire_transfer"},
        {"thresholds": {"detail_min_length": -1}},
    ])
    def test_invalid_structure(self, data):
        with pytest.raises(ValueError):
            parse_settings(data)

    def test_partial_configuration(self):
        settings = parse_settings({"reasons_cap": 4})
        assert settings.reasons_cap == 4
        assert settings.weights == {}

    def test_save_then_load(self, tmp_path):
        settings = TrustSettings(weights={"payment_request": 30}, reasons_cap=5)
        path = tmp_path / "nested" / "rules.yaml"
        save_settings(str(path), settings)
        assert load_settings(str(path)) == settings


class TestResolveConfigPath:

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("JOBTRUST_CONFIG", "from-env.yaml")
        assert resolve_config_path("explicit.yaml") == "explicit.yaml"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("JOBTRUST_CONFIG", "from-env.yaml")
        assert resolve_config_path() == "from-env.yaml"

    def test_defaults_when_nothing_found(self, monkeypatch, tmp_path):
        monkeypatch.delenv("JOBTRUST_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        assert resolve_config_path() is None
        assert load_effective_settings() == TrustSettings()

    def test_default_path_used_when_present(self, monkeypatch, tmp_path):
        monkeypatch.delenv("JOBTRUST_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        write_yaml(tmp_path / DEFAULT_CONFIG_PATH, {"reasons_cap": 3})
        assert resolve_config_path() == DEFAULT_CONFIG_PATH
        assert load_effective_settings().reasons_cap == 3
