"""
Configuration management for trust rule tuning.

Handles loading and saving of the trust_rules.yaml file.
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any, Optional

from .analyze.rules import (
    RuleCatalog,
    build_catalog,
    DEFAULT_REASONS_CAP,
    DEFAULT_SHORT_DESCRIPTION_LENGTH,
    DEFAULT_CAPS_RUN_LIMIT,
)


DEFAULT_CONFIG_PATH = "config/trust_rules.yaml"
DEFAULT_REPORT_DIR = "data/reports"
DEFAULT_EXPORT_DIR = "data/exports"

# Detail view text shorter than this is scored in card mode
DEFAULT_DETAIL_MIN_LENGTH = 300

KNOWN_KEYS = {"weights", "disabled_rules", "thresholds", "section_min_lengths", "reasons_cap"}
KNOWN_THRESHOLDS = {"short_description_length", "caps_run_limit", "detail_min_length"}


@dataclass(frozen=True)
class TrustSettings:
    """Tuning values loaded from configuration."""
    weights: Dict[str, int] = field(default_factory=dict)
    disabled_rules: List[str] = field(default_factory=list)
    section_min_lengths: Dict[str, int] = field(default_factory=dict)
    reasons_cap: int = DEFAULT_REASONS_CAP
    short_description_length: int = DEFAULT_SHORT_DESCRIPTION_LENGTH
    caps_run_limit: int = DEFAULT_CAPS_RUN_LIMIT
    detail_min_length: int = DEFAULT_DETAIL_MIN_LENGTH

    def build_catalog(self) -> RuleCatalog:
        """
        Build the rule catalog these settings describe.

        Raises:
            CatalogError: If any weight, key or threshold is invalid
        """
        return build_catalog(
            weights=self.weights,
            disabled=self.disabled_rules,
            section_min_lengths=self.section_min_lengths,
            reasons_cap=self.reasons_cap,
            short_description_length=self.short_description_length,
            caps_run_limit=self.caps_run_limit,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weights": dict(self.weights),
            "disabled_rules": list(self.disabled_rules),
            "thresholds": {
                "short_description_length": self.short_description_length,
                "caps_run_limit": self.caps_run_limit,
                "detail_min_length": self.detail_min_length,
            },
            "section_min_lengths": dict(self.section_min_lengths),
            "reasons_cap": self.reasons_cap,
        }


def _require_mapping(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def parse_settings(data: Dict[str, Any]) -> TrustSettings:
    """
    Validate a configuration dictionary and turn it into settings.

    Args:
        data: Parsed YAML content

    Returns:
        TrustSettings

    Raises:
        ValueError: If the structure is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping at the top level")

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown configuration key(s): {', '.join(unknown)}")

    weights = _require_mapping(data, "weights")
    section_min_lengths = _require_mapping(data, "section_min_lengths")
    thresholds = _require_mapping(data, "thresholds")

    unknown = sorted(set(thresholds) - KNOWN_THRESHOLDS)
    if unknown:
        raise ValueError(f"Unknown threshold(s): {', '.join(unknown)}")

    disabled = data.get("disabled_rules") or []
    if not isinstance(disabled, list):
        raise ValueError("'disabled_rules' must be a list")

    detail_min_length = thresholds.get("detail_min_length", DEFAULT_DETAIL_MIN_LENGTH)
    if isinstance(detail_min_length, bool) or not isinstance(detail_min_length, int) or detail_min_length < 0:
        raise ValueError(f"'detail_min_length' must be a non-negative integer, got {detail_min_length!r}")

    return TrustSettings(
        weights=dict(weights),
        disabled_rules=[str(key) for key in disabled],
        section_min_lengths=dict(section_min_lengths),
        reasons_cap=data.get("reasons_cap", DEFAULT_REASONS_CAP),
        short_description_length=thresholds.get(
            "short_description_length", DEFAULT_SHORT_DESCRIPTION_LENGTH
        ),
        caps_run_limit=thresholds.get("caps_run_limit", DEFAULT_CAPS_RUN_LIMIT),
        detail_min_length=detail_min_length,
    )


def load_settings(path: str) -> TrustSettings:
    """
    Load trust rule tuning from YAML file.

    Args:
        path: Path to trust_rules.yaml

    Returns:
        TrustSettings with overrides applied on top of the defaults

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If the structure is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        raise ValueError(f"Configuration file is empty: {path}")

    return parse_settings(data)


def save_settings(path: str, settings: TrustSettings) -> None:
    """
    Save trust rule tuning to YAML file.

    Note: This will overwrite the existing file and does not preserve
    comments.

    Args:
        path: Path to save trust_rules.yaml
        settings: Settings to write
    """
    config_path = Path(path)

    # Ensure parent directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(settings.to_dict(), f, default_flow_style=False, allow_unicode=True, sort_keys=False)


def resolve_config_path(explicit: Optional[str] = None) -> Optional[str]:
    """
    Pick the configuration file to use.

    An explicit path always wins. Otherwise JOBTRUST_CONFIG is used, then
    the default path if that file exists. Returns None to use built-in defaults.

    Args:
        explicit: Path given on the command line

    Returns:
        Path to load, or None
    """
    if explicit:
        return explicit

    from_env = os.getenv("JOBTRUST_CONFIG")
    if from_env:
        return from_env

    if Path(DEFAULT_CONFIG_PATH).exists():
        return DEFAULT_CONFIG_PATH

    return None


def load_effective_settings(explicit: Optional[str] = None) -> TrustSettings:
    """Load settings from the resolved config path, or return defaults."""
    path = resolve_config_path(explicit)
    if path is None:
        return TrustSettings()
    return load_settings(path)
