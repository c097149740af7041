"""
Trust rules for Job Trust Scanner.

Defines the weighted red-flag rules, structural heuristics, section checks and
positive signals used to score job postings. English-only support (EN).

The catalog is built once and never mutated afterwards; custom weights and
thresholds produce a new catalog through build_catalog().
"""

from typing import Callable, Dict, Iterable, List, Any, Mapping, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from types import MappingProxyType
import re


Matcher = Callable[[str], bool]


class CatalogError(ValueError):
    """Raised when a rule catalog is misconfigured."""


@dataclass(frozen=True)
class Rule:
    """Weighted red-flag pattern tested against lower-cased text."""
    key: str
    matcher: Matcher = field(repr=False)
    label: str
    weight: int


@dataclass(frozen=True)
class Heuristic:
    """Weighted deduction computed from a property of the original text."""
    key: str
    predicate: Callable[[str, "RuleCatalog"], bool] = field(repr=False)
    label: str
    weight: int


@dataclass(frozen=True)
class SectionCheck:
    """Expected posting section; penalized when missing above min_length."""
    key: str
    matcher: Matcher = field(repr=False)
    label: str
    weight: int
    min_length: int


@dataclass(frozen=True)
class PositiveSignal:
    """Informational signal. Adds a reason, never changes the score."""
    key: str
    predicate: Callable[[str, Dict[str, bool]], bool] = field(repr=False)
    label: str


@dataclass(frozen=True)
class RuleCatalog:
    """Immutable bundle of everything the analyzer evaluates."""
    rules: Tuple[Rule, ...]
    heuristics: Tuple[Heuristic, ...]
    sections: Tuple[SectionCheck, ...]
    positives: Tuple[PositiveSignal, ...]
    reasons_cap: int
    short_description_length: int
    caps_run_limit: int

    def weight_table(self) -> Mapping[str, int]:
        """Return a read-only key -> weight mapping for every weighted entry."""
        table = {}
        for entry in self.rules + self.heuristics + self.sections:
            table[entry.key] = entry.weight
        return MappingProxyType(table)


def compile_pattern(pattern: str) -> "re.Pattern":
    """
    Compile a rule pattern, failing fast on invalid regular expressions.

    Args:
        pattern: Regular expression source

    Returns:
        Compiled pattern (case-insensitive)

    Raises:
        CatalogError: If the pattern does not compile
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise CatalogError(f"Invalid rule pattern {pattern!r}: {e}") from e


def pattern_matcher(*patterns: str) -> Matcher:
    """Build a matcher that is true when any of the patterns occurs."""
    compiled = tuple(compile_pattern(p) for p in patterns)

    def matches(text: str) -> bool:
        return any(p.search(text) for p in compiled)

    return matches


def distinct_word_matcher(words: Iterable[str], minimum: int) -> Matcher:
    """
    Build a matcher that needs at least `minimum` distinct words from a set.

    Repeating the same word does not count twice.
    """
    compiled = tuple(compile_pattern(r"\b" + re.escape(w) + r"\b") for w in words)
    if minimum < 1:
        raise CatalogError(f"Distinct word minimum must be positive, got {minimum}")

    def matches(text: str) -> bool:
        hits = 0
        for p in compiled:
            if p.search(text):
                hits += 1
                if hits >= minimum:
                    return True
        return False

    return matches


# Common misspellings seen in low-effort scam posts
TYPO_INDICATORS = (
    "recieve", "recieved", "seperate", "definately", "occured", "untill",
    "wich", "comunication", "oppurtunity", "oportunity", "responsability",
    "sucessful", "succesful", "adress", "buisness", "enviroment",
    "goverment", "immediatly", "guarentee", "garantee", "payed",
    "beleive", "acheive", "accomodate", "begining", "calender",
)


# (key, patterns, label, weight), in display order
RED_FLAGS = (
    ("immediate_hire", (r"immediate\s*hire", r"hiring\s+immediately"),
     "Immediate hire pressure", 12),
    ("no_experience", (r"no\s*experience\s*(required|needed|necessary)",),
     "No experience required", 8),
    ("unrealistic_earnings", (r"work from home and earn thousands",
                              r"earn\s+\$?\d[\d,]*\+?\s*(a|per)\s*(day|week)\s+from\s+home"),
     "Unrealistic earnings claim", 15),
    ("payment_request", (r"send\s*payment", r"send\s+(us\s+)?money"),
     "Payment request", 20),
    ("training_fee", (r"training\s*fee", r"pay\s+for\s+(your\s+)?training"),
     "Training fee required", 20),
    ("quick_money", (r"quick\s*money", r"easy\s*money", r"fast\s*cash"),
     "Quick money promise", 15),
    ("wire_transfer", (r"wire\s*transfer", r"western\s+union", r"moneygram"),
     "Wire transfer mention", 18),
    ("gift_cards", (r"gift\s*cards?",),
     "Gift card mention", 18),
    ("unofficial_messenger", (r"\b(telegram|whatsapp)\b",
                              r"\b(on|via|through|over)\s+signal\b",
                              r"\bsignal\s+(app|messenger)\b"),
     "Unofficial communication channel", 10),
    ("cryptocurrency", (r"\bcrypto(currency|currencies)?\b", r"\bbitcoin\b", r"\busdt\b"),
     "Cryptocurrency mention", 8),
    ("upfront_fee", (r"upfront\s*fee", r"application\s*fee", r"registration\s*fee",
                     r"processing\s*fee"),
     "Upfront fee required", 20),
    ("external_form", (r"apply\s+via\s+google\s+form", r"docs\.google\.com/forms",
                       r"forms\.gle/"),
     "External application form", 8),
    ("dm_only", (r"contact\s+via\s+dm", r"direct\s+message", r"\bdm\s+me\b"),
     "DM-only contact", 6),
    ("high_short_term_pay", (r"\$\d{1,3},?\d{3,}\+?\s*per\s*(week|day)",),
     "Unusually high weekly/daily pay", 10),
    ("artificial_scarcity", (r"limited\s*spots?", r"only\s*\d+\s*positions?\s*(left|remaining|available)?"),
     "Artificial scarcity", 5),
    ("financial_details", (r"bank\s+account\s+(details|number|information)",
                           r"social\s+security\s+number", r"\bssn\b",
                           r"credit\s+card\s+(details|number|information)"),
     "Personal financial details requested", 15),
    ("guaranteed_income", (r"guaranteed\s+(income|earnings|salary|pay)",),
     "Guaranteed income claim", 12),
    ("personal_email", (r"@(gmail|yahoo|hotmail|outlook|aol)\.com",),
     "Personal email address for contact", 6),
    ("no_interview", (r"no\s+interview", r"without\s+(an\s+)?interview"),
     "Hiring without interview", 10),
)

TYPO_RULE = ("spelling_errors", "Multiple spelling errors", 6)
TYPO_MINIMUM = 2


# (key, patterns, label, weight, min_length)
SECTION_CHECKS = (
    ("responsibilities", (
        r"responsibilit", r"duties", r"what you(['’]ll| will) do", r"your role",
        r"the role", r"day[- ]to[- ]day", r"key tasks", r"you will be responsible",
        r"in this role", r"job description", r"what you(['’]ll| will) be doing",
    ), "Missing job responsibilities", 8, 200),
    ("qualifications", (
        r"qualification", r"requirement", r"skills", r"experience",
        r"who you are", r"what we(['’]re| are) looking for", r"must have",
        r"nice to have", r"preferred", r"degree", r"proficien",
    ), "Missing qualifications/requirements", 8, 200),
    ("company_info", (
        r"about (us|the company|our (team|company))", r"who we are",
        r"our mission", r"company overview", r"our story", r"founded in",
        r"we are a (leading|growing|global)", r"about the team",
    ), "Missing company information", 5, 300),
)


DETAILED_POSTING_LENGTH = 500

# (key, patterns, label)
POSITIVE_PATTERNS = (
    ("benefits", (
        r"benefits", r"health insurance", r"401k", r"401\(k\)", r"\bpto\b",
        r"paid time off", r"dental", r"vision insurance", r"retirement plan",
    ), "Benefits mentioned"),
    ("salary_range", (
        r"\$\s?\d[\d,]*(\.\d+)?\s*k?\s*(-|–|to)\s*\$?\s?\d[\d,]*(\.\d+)?\s*k?",
        r"salary range",
    ), "Salary range provided"),
    ("hiring_process", (
        r"interview process", r"hiring process", r"next steps", r"phone screen",
        r"technical interview", r"onsite interview", r"background check",
    ), "Hiring process described"),
    ("established_company", (
        r"founded in \d{4}", r"established in \d{4}", r"fortune 500",
        r"publicly traded", r"headquartered in", r"offices in",
    ), "Established company"),
    ("career_growth", (
        r"career growth", r"career development", r"professional development",
        r"mentorship", r"learning budget", r"growth opportunit",
    ), "Career growth opportunities"),
    ("work_life_balance", (
        r"work[- ]life balance", r"flexible hours", r"flexible schedule",
        r"parental leave", r"remote[- ]friendly", r"hybrid work",
    ), "Work-life balance mentioned"),
    ("hr_contact", (
        r"\b(careers|recruiting|recruitment|hr|talent|jobs|hiring)@"
        r"(?!gmail\.|yahoo\.|hotmail\.|outlook\.|aol\.)[a-z0-9-]+(\.[a-z0-9-]+)*\.[a-z]{2,}",
    ), "Professional HR contact"),
    ("eeo_statement", (
        r"equal opportunity employer", r"\beeo\b", r"diversity",
    ), "Professional EEO statement"),
)


DEFAULT_REASONS_CAP = 8
DEFAULT_SHORT_DESCRIPTION_LENGTH = 120
DEFAULT_CAPS_RUN_LIMIT = 15

SHORT_DESCRIPTION_RULE = ("short_description", "Suspiciously short description", 10)
EXCESSIVE_CAPS_RULE = ("excessive_caps", "Excessive use of capital letters", 4)

CAPS_RUN = re.compile(r"[A-Z]{3,}")


def _is_short(text: str, catalog: "RuleCatalog") -> bool:
    return len(text) < catalog.short_description_length


def _has_excessive_caps(text: str, catalog: "RuleCatalog") -> bool:
    return len(CAPS_RUN.findall(text)) > catalog.caps_run_limit


def _detailed_posting(text: str, sections_found: Dict[str, bool]) -> bool:
    return (
        len(text) > DETAILED_POSTING_LENGTH
        and sections_found.get("responsibilities", False)
        and sections_found.get("qualifications", False)
    )


def _pattern_signal(*patterns: str) -> Callable[[str, Dict[str, bool]], bool]:
    matcher = pattern_matcher(*patterns)
    return lambda text, sections_found: matcher(text)


def _weight(key: str, default: int, weights: Dict[str, Any]) -> int:
    value = weights.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"Weight for '{key}' must be an integer, got {value!r}")
    if value < 0:
        raise CatalogError(f"Weight for '{key}' must be non-negative, got {value}")
    return value


def _gate(key: str, default: int, section_min_lengths: Dict[str, Any]) -> int:
    value = section_min_lengths.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CatalogError(f"Section length gate for '{key}' must be a non-negative integer, got {value!r}")
    return value


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise CatalogError(f"'{name}' must be a positive integer, got {value!r}")
    return value


def rule_keys() -> List[str]:
    """
    List every key that configuration may override or disable.

    Returns:
        Keys in catalog order: rules, heuristics, then sections
    """
    keys = [key for key, _, _, _ in RED_FLAGS]
    keys.append(TYPO_RULE[0])
    keys.extend([SHORT_DESCRIPTION_RULE[0], EXCESSIVE_CAPS_RULE[0]])
    keys.extend(key for key, _, _, _, _ in SECTION_CHECKS)
    return keys


def build_catalog(
    weights: Optional[Dict[str, Any]] = None,
    disabled: Optional[Sequence[str]] = None,
    section_min_lengths: Optional[Dict[str, Any]] = None,
    reasons_cap: int = DEFAULT_REASONS_CAP,
    short_description_length: int = DEFAULT_SHORT_DESCRIPTION_LENGTH,
    caps_run_limit: int = DEFAULT_CAPS_RUN_LIMIT,
) -> RuleCatalog:
    """
    Build and validate an immutable rule catalog.

    Args:
        weights: Overrides mapping rule key -> non-negative integer weight
        disabled: Rule keys to leave out of the catalog
        section_min_lengths: Overrides mapping section key -> length gate
        reasons_cap: Maximum number of reasons returned per analysis
        short_description_length: Texts shorter than this are penalized
        caps_run_limit: Allowed number of all-caps runs before penalizing

    Returns:
        RuleCatalog ready to be shared across analyses

    Raises:
        CatalogError: On unknown keys, bad weights or bad thresholds
    """
    weights = dict(weights or {})
    disabled = set(disabled or ())
    section_min_lengths = dict(section_min_lengths or {})

    known = set(rule_keys())
    section_keys = {key for key, _, _, _, _ in SECTION_CHECKS}
    for name, keys in (("weights", weights), ("disabled_rules", disabled)):
        unknown = sorted(set(keys) - known)
        if unknown:
            raise CatalogError(f"Unknown rule key(s) in {name}: {', '.join(unknown)}")
    unknown = sorted(set(section_min_lengths) - section_keys)
    if unknown:
        raise CatalogError(f"Unknown section key(s) in section_min_lengths: {', '.join(unknown)}")

    # Overrides are validated even when their key is disabled
    for key in weights:
        _weight(key, 0, weights)
    for key in section_min_lengths:
        _gate(key, 0, section_min_lengths)

    rules = []
    for key, patterns, label, default in RED_FLAGS:
        if key in disabled:
            continue
        rules.append(Rule(key, pattern_matcher(*patterns), label, _weight(key, default, weights)))

    key, label, default = TYPO_RULE
    if key not in disabled:
        rules.append(Rule(
            key,
            distinct_word_matcher(TYPO_INDICATORS, TYPO_MINIMUM),
            label,
            _weight(key, default, weights),
        ))

    heuristics = []
    for (key, label, default), predicate in (
        (SHORT_DESCRIPTION_RULE, _is_short),
        (EXCESSIVE_CAPS_RULE, _has_excessive_caps),
    ):
        if key not in disabled:
            heuristics.append(Heuristic(key, predicate, label, _weight(key, default, weights)))

    sections = []
    for key, patterns, label, default, min_length in SECTION_CHECKS:
        if key in disabled:
            continue
        sections.append(SectionCheck(
            key,
            pattern_matcher(*patterns),
            label,
            _weight(key, default, weights),
            _gate(key, min_length, section_min_lengths),
        ))

    positives = [PositiveSignal("detailed_posting", _detailed_posting, "Detailed, structured job posting")]
    for key, patterns, label in POSITIVE_PATTERNS:
        positives.append(PositiveSignal(key, _pattern_signal(*patterns), label))

    return RuleCatalog(
        rules=tuple(rules),
        heuristics=tuple(heuristics),
        sections=tuple(sections),
        positives=tuple(positives),
        reasons_cap=_positive_int("reasons_cap", reasons_cap),
        short_description_length=_positive_int("short_description_length", short_description_length),
        caps_run_limit=_positive_int("caps_run_limit", caps_run_limit),
    )


# Built at import so a broken table fails at startup, not per call
DEFAULT_CATALOG = build_catalog()


def get_rule_table(catalog: Optional[RuleCatalog] = None) -> List[Dict[str, Any]]:
    """
    Describe the weighted entries of a catalog for reference/tuning.

    Args:
        catalog: Catalog to describe (default catalog if omitted)

    Returns:
        List of dicts with key, kind, label and weight
    """
    catalog = catalog or DEFAULT_CATALOG
    table = []
    for kind, entries in (
        ("rule", catalog.rules),
        ("heuristic", catalog.heuristics),
        ("section", catalog.sections),
    ):
        for entry in entries:
            table.append({
                "key": entry.key,
                "kind": kind,
                "label": entry.label,
                "weight": entry.weight,
            })
    return table
