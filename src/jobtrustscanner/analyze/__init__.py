"""
Analysis module for Job Trust Scanner.

Handles heuristic trust scoring of job posting texts.
"""

from .rules import (
    Rule,
    Heuristic,
    SectionCheck,
    PositiveSignal,
    RuleCatalog,
    CatalogError,
    DEFAULT_CATALOG,
    build_catalog,
    get_rule_table,
    rule_keys,
)
from .analyzer import (
    TrustAnalyzer,
    AnalysisResult,
    TrustLabel,
    LABEL_COLORS,
    analyze_job,
    label_for_score,
)

__all__ = [
    "Rule",
    "Heuristic",
    "SectionCheck",
    "PositiveSignal",
    "RuleCatalog",
    "CatalogError",
    "DEFAULT_CATALOG",
    "build_catalog",
    "get_rule_table",
    "rule_keys",
    "TrustAnalyzer",
    "AnalysisResult",
    "TrustLabel",
    "LABEL_COLORS",
    "analyze_job",
    "label_for_score",
]
