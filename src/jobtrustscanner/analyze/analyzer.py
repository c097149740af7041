"""
Trust analyzer for Job Trust Scanner.

Scores a job posting text against a rule catalog and explains the result.
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from enum import Enum

from .rules import RuleCatalog, DEFAULT_CATALOG


class TrustLabel(str, Enum):
    """Categorical trust level derived from the final score."""
    HIGH = "High Trust"
    MEDIUM = "Medium Trust"
    LOW = "Low Trust"


HIGH_TRUST_MIN_SCORE = 80
MEDIUM_TRUST_MIN_SCORE = 50

LABEL_COLORS = {
    TrustLabel.HIGH: "#16a34a",
    TrustLabel.MEDIUM: "#f59e0b",
    TrustLabel.LOW: "#dc2626",
}

NO_RED_FLAGS_REASON = "✓ No red flags detected"


@dataclass
class AnalysisResult:
    """Result of analyzing a job posting."""
    score: int
    label: TrustLabel
    color: str
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "color": self.color,
            "reasons": list(self.reasons),
        }


def label_for_score(score: int) -> TrustLabel:
    """Map a clamped score to its trust label."""
    if score >= HIGH_TRUST_MIN_SCORE:
        return TrustLabel.HIGH
    if score >= MEDIUM_TRUST_MIN_SCORE:
        return TrustLabel.MEDIUM
    return TrustLabel.LOW


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


def _coerce_text(text: Any) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    try:
        return str(text)
    except Exception:
        return ""


class TrustAnalyzer:
    """
    Scores job postings against an immutable rule catalog.

    The analyzer keeps no state between calls, so one instance can be shared
    freely. Catalog problems surface when the catalog is built, never here.
    """

    def __init__(self, catalog: Optional[RuleCatalog] = None):
        """
        Initialize analyzer.

        Args:
            catalog: Rule catalog to evaluate (default catalog if omitted)
        """
        self.catalog = catalog or DEFAULT_CATALOG

    def analyze(self, text: Any, include_reasons: bool = False) -> AnalysisResult:
        """
        Analyze a job posting text.

        Rules and heuristics always affect the score. Section checks and
        positive signals only run when reasons are requested; positive
        signals never add score.

        Args:
            text: Posting text (None or non-string values are coerced)
            include_reasons: Run the explanatory checks and collect reasons

        Returns:
            AnalysisResult with score, label, color and capped reasons
        """
        catalog = self.catalog
        original = _coerce_text(text).strip()
        normalized = original.lower()

        score = 100
        reasons = []

        for rule in catalog.rules:
            if rule.matcher(normalized):
                score -= rule.weight
                if include_reasons:
                    reasons.append(f"-{rule.weight}: {rule.label}")

        # Caps counting needs the original case
        for heuristic in catalog.heuristics:
            if heuristic.predicate(original, catalog):
                score -= heuristic.weight
                if include_reasons:
                    reasons.append(f"-{heuristic.weight}: {heuristic.label}")

        if include_reasons:
            sections_found = {}
            for section in catalog.sections:
                found = section.matcher(normalized)
                sections_found[section.key] = found
                if not found and len(normalized) > section.min_length:
                    score -= section.weight
                    reasons.append(f"-{section.weight}: {section.label}")

            for signal in catalog.positives:
                if signal.predicate(normalized, sections_found):
                    reasons.append(f"✓ {signal.label}")

            if not reasons:
                reasons.append(NO_RED_FLAGS_REASON)

        final_score = clamp_score(score)
        label = label_for_score(final_score)

        return AnalysisResult(
            score=final_score,
            label=label,
            color=LABEL_COLORS[label],
            reasons=reasons[:catalog.reasons_cap],
        )


_default_analyzer = TrustAnalyzer()


def analyze_job(text: Any, include_reasons: bool = False) -> AnalysisResult:
    """
    Analyze a job posting with the default catalog.

    Args:
        text: Posting text to score
        include_reasons: Collect explanatory reasons

    Returns:
        AnalysisResult
    """
    return _default_analyzer.analyze(text, include_reasons=include_reasons)
