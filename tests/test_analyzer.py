"""
Trust analyzer tests.
"""

import pytest

from jobtrustscanner.analyze import (
    TrustAnalyzer,
    TrustLabel,
    LABEL_COLORS,
    analyze_job,
    build_catalog,
    label_for_score,
)
from jobtrustscanner.analyze.analyzer import NO_RED_FLAGS_REASON


SAMPLE_TEXTS = [
    "",
    "   \n\t ",
    "wire transfer",
    "URGENT " * 40,
    "immediate hire, no experience required, send payment, training fee, quick money, "
    "wire transfer, gift card, whatsapp, crypto, upfront fee, limited spots, bitcoin",
    "A calm, ordinary description of a bookkeeping role at a family bakery. " * 10,
]


class TestScenarios:
    """End-to-end scoring scenarios."""

    def test_empty_text(self, analyzer):
        """Empty text only gets the short description penalty."""
        result = analyzer.analyze("", include_reasons=True)
        assert result.score == 90
        assert result.label == TrustLabel.HIGH
        assert result.color == "#16a34a"
        assert result.reasons == ["-10: Suspiciously short description"]

    def test_whitespace_only_text(self, analyzer):
        result = analyzer.analyze("  \n\t  ", include_reasons=True)
        assert result.score == 90
        assert result.reasons == ["-10: Suspiciously short description"]

    def test_short_scam_message(self, analyzer, scam_posting):
        """Payment, wire transfer, messenger and short penalties all apply."""
        result = analyzer.analyze(scam_posting, include_reasons=True)
        assert result.score == 100 - (20 + 18 + 10 + 10)
        assert result.label == TrustLabel.LOW
        assert result.color == "#dc2626"
        assert result.reasons == [
            "-20: Payment request",
            "-18: Wire transfer mention",
            "-10: Unofficial communication channel",
            "-10: Suspiciously short description",
        ]

    def test_well_formed_posting(self, analyzer, well_formed_posting):
        """A structured posting keeps its full score and only gets positive reasons."""
        assert len(well_formed_posting) > 500
        result = analyzer.analyze(well_formed_posting, include_reasons=True)
        assert result.score == 100
        assert result.label == TrustLabel.HIGH
        assert result.reasons
        assert all(reason.startswith("✓") for reason in result.reasons)
        assert "✓ Benefits mentioned" in result.reasons
        assert "✓ Detailed, structured job posting" in result.reasons

    def test_multiple_typos_give_one_reason(self, analyzer, plain_posting):
        text = plain_posting + " You will recieve a seperate welcome pack. Recieve it early."
        result = analyzer.analyze(text, include_reasons=True)
        spelling = [r for r in result.reasons if "spelling" in r]
        assert spelling == ["-6: Multiple spelling errors"]
        assert result.score == 94

    def test_single_typo_is_ignored(self, analyzer, plain_posting):
        text = plain_posting + " You will recieve a welcome pack, recieve it early."
        result = analyzer.analyze(text, include_reasons=True)
        assert not any("spelling" in r for r in result.reasons)
        assert result.score == 100

    def test_no_red_flags_default_reason(self, analyzer, plain_posting):
        result = analyzer.analyze(plain_posting, include_reasons=True)
        assert result.score == 100
        assert result.reasons == [NO_RED_FLAGS_REASON]


class TestScoring:
    """Scoring properties."""

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    @pytest.mark.parametrize("include_reasons", [True, False])
    def test_score_bounds(self, analyzer, text, include_reasons):
        result = analyzer.analyze(text, include_reasons=include_reasons)
        assert 0 <= result.score <= 100

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_deterministic(self, analyzer, text):
        assert analyzer.analyze(text, True) == analyzer.analyze(text, True)
        assert analyzer.analyze(text, False) == analyzer.analyze(text, False)

    def test_repeated_match_counts_once(self, analyzer):
        once = analyzer.analyze("wire transfer")
        twice = analyzer.analyze("wire transfer wire transfer")
        assert once.score == twice.score == 100 - 18 - 10

    def test_deductions_clamp_at_zero(self, analyzer):
        result = analyzer.analyze(SAMPLE_TEXTS[4], include_reasons=True)
        assert result.score == 0
        assert result.label == TrustLabel.LOW

    def test_reasons_are_capped(self, analyzer):
        result = analyzer.analyze(SAMPLE_TEXTS[4], include_reasons=True)
        assert len(result.reasons) == 8
        # Catalog order is kept, not re-sorted by weight
        assert result.reasons[0] == "-12: Immediate hire pressure"
        assert result.reasons[1] == "-8: No experience required"

    def test_custom_cap(self):
        analyzer = TrustAnalyzer(build_catalog(reasons_cap=3))
        result = analyzer.analyze(SAMPLE_TEXTS[4], include_reasons=True)
        assert len(result.reasons) == 3

    def test_excessive_caps(self, analyzer):
        text = "Great role. " + " ".join(["APPLY"] * 16) + " " + "details follow. " * 10
        result = analyzer.analyze(text, include_reasons=True)
        assert "-4: Excessive use of capital letters" in result.reasons

    def test_caps_at_limit_not_penalized(self, analyzer):
        text = "Great role. " + " ".join(["APPLY"] * 15) + " " + "details follow. " * 10
        result = analyzer.analyze(text, include_reasons=True)
        assert "-4: Excessive use of capital letters" not in result.reasons

    def test_lowercase_text_has_no_caps_runs(self, analyzer):
        text = ("apply " * 40).strip()
        result = analyzer.analyze(text, include_reasons=True)
        assert "-4: Excessive use of capital letters" not in result.reasons


class TestReasonsGating:
    """Section and positive checks only run when reasons are requested."""

    UNSTRUCTURED = ("We are hiring for a position in our warehouse team. " * 7).strip()

    def test_card_mode_has_no_reasons(self, analyzer, scam_posting):
        result = analyzer.analyze(scam_posting, include_reasons=False)
        assert result.reasons == []

    def test_card_mode_skips_section_checks(self, analyzer):
        result = analyzer.analyze(self.UNSTRUCTURED, include_reasons=False)
        assert result.score == 100
        assert result.reasons == []

    def test_detail_mode_penalizes_missing_sections(self, analyzer):
        result = analyzer.analyze(self.UNSTRUCTURED, include_reasons=True)
        assert result.reasons == [
            "-8: Missing job responsibilities",
            "-8: Missing qualifications/requirements",
            "-5: Missing company information",
        ]
        assert result.score == 79
        assert result.label == TrustLabel.MEDIUM
        assert result.color == "#f59e0b"

    def test_company_info_gate_is_longer(self, analyzer):
        text = ("We are hiring for a position in our warehouse team. " * 5).strip()
        assert 200 < len(text) <= 300
        result = analyzer.analyze(text, include_reasons=True)
        assert "-5: Missing company information" not in result.reasons
        assert result.score == 84

    def test_positive_signals_do_not_add_score(self, analyzer):
        text = self.UNSTRUCTURED + " Benefits include health insurance and paid time off."
        result = analyzer.analyze(text, include_reasons=True)
        assert "✓ Benefits mentioned" in result.reasons
        assert result.score == 79

    def test_positive_signals_follow_deductions(self, analyzer):
        text = self.UNSTRUCTURED + " Salary: $60,000 - $75,000. We are an equal opportunity employer."
        result = analyzer.analyze(text, include_reasons=True)
        first_positive = next(i for i, r in enumerate(result.reasons) if r.startswith("✓"))
        assert all(r.startswith("-") for r in result.reasons[:first_positive])
        assert "✓ Salary range provided" in result.reasons
        assert "✓ Professional EEO statement" in result.reasons


class TestInputCoercion:
    """The analyzer never raises for odd input."""

    def test_none(self, analyzer):
        assert analyzer.analyze(None) == analyzer.analyze("")

    def test_non_string(self, analyzer):
        result = analyzer.analyze(12345, include_reasons=True)
        assert result.reasons == ["-10: Suspiciously short description"]

    def test_unprintable_object(self, analyzer):
        class Broken:
            def __str__(self):
                raise RuntimeError("no text")

        assert analyzer.analyze(Broken()) == analyzer.analyze("")

    def test_module_level_helper(self, scam_posting):
        assert analyze_job(scam_posting).score == 42
        assert analyze_job(scam_posting).reasons == []


class TestLabels:

    @pytest.mark.parametrize("score,label", [
        (100, TrustLabel.HIGH),
        (80, TrustLabel.HIGH),
        (79, TrustLabel.MEDIUM),
        (50, TrustLabel.MEDIUM),
        (49, TrustLabel.LOW),
        (0, TrustLabel.LOW),
    ])
    def test_label_thresholds(self, score, label):
        assert label_for_score(score) == label

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_label_matches_score(self, analyzer, text):
        result = analyzer.analyze(text, include_reasons=True)
        assert result.label == label_for_score(result.score)
        assert result.color == LABEL_COLORS[result.label]

    def test_to_dict(self, analyzer, scam_posting):
        data = analyzer.analyze(scam_posting, include_reasons=True).to_dict()
        assert data["score"] == 42
        assert data["label"] == "Low Trust"
        assert data["color"] == "#dc2626"
        assert len(data["reasons"]) == 4
