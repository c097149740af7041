"""
Text source helpers for Job Trust Scanner.

Prepares raw page or card text before it reaches the analyzer:
- Whitespace and duplicate-line cleanup
- Trailing "similar jobs" section removal
- Job posting detection
- Ordered-fallback location of the posting body
"""

import hashlib
import re
from typing import Callable, List, Optional, Sequence


# Headings after which a page lists other postings, not this one
TRAILING_SECTION_MARKERS = [
    r"similar jobs",
    r"recommended jobs",
    r"more jobs like this",
    r"jobs you may be interested in",
    r"people also viewed",
    r"other jobs at",
]

JOB_KEYWORDS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"responsibil",
        r"qualification",
        r"requirement",
        r"preferred",
        r"benefits?",
        r"job description",
        r"application deadline",
        r"what you('ll| will) do",
        r"who you are",
        r"about the role",
        r"apply now",
    )
]

DESCRIPTION_HEADINGS = re.compile(
    r"^\s*(job description|about the role|about this job|the role|position overview)\s*:?\s*$",
    re.IGNORECASE | re.MULTILINE,
)

MIN_JOB_TEXT_LENGTH = 40
MAX_CARD_TEXT_LENGTH = 1000
MIN_KEYWORD_HITS = 2

Probe = Callable[[str], Optional[str]]


def strip_trailing_sections(text: str) -> str:
    """
    Cut the text at the first line that opens a related-jobs section.

    Args:
        text: Extracted page text

    Returns:
        Text up to (not including) the first trailing-section heading
    """
    if not text:
        return ""

    pattern = re.compile(
        r"^\s*(" + "|".join(TRAILING_SECTION_MARKERS) + r")\b.*$",
        re.IGNORECASE | re.MULTILINE,
    )
    match = pattern.search(text)
    if match:
        return text[:match.start()].rstrip()
    return text


def clean_posting_text(text: str) -> str:
    """
    Normalize extracted text for analysis.

    Collapses runs of spaces and tabs, drops blank and repeated lines, and
    removes trailing related-jobs sections.

    Args:
        text: Raw extracted text

    Returns:
        Cleaned text (may be empty)
    """
    if not text:
        return ""

    text = strip_trailing_sections(text.replace("\r\n", "\n").replace("\r", "\n"))

    seen = set()
    lines = []
    for line in text.split("\n"):
        line = re.sub(r"[ \t\u00a0]+", " ", line).strip()
        if not line:
            continue
        key = line.lower()
        if key in seen:
            continue
        seen.add(key)
        lines.append(line)

    return "\n".join(lines)


def count_job_keywords(text: str) -> int:
    return sum(1 for pattern in JOB_KEYWORDS if pattern.search(text))


def is_likely_job_posting(text: str, max_length: Optional[int] = None) -> bool:
    """
    Check whether a text looks like a job posting or job card.

    Args:
        text: Candidate text
        max_length: Optional upper bound (card texts are short)

    Returns:
        True if enough job keywords appear
    """
    if not text or len(text) < MIN_JOB_TEXT_LENGTH:
        return False
    if max_length is not None and len(text) >= max_length:
        return False
    return count_job_keywords(text) >= MIN_KEYWORD_HITS


def probe_description_heading(text: str) -> Optional[str]:
    """Return the text following a job-description heading, if any."""
    match = DESCRIPTION_HEADINGS.search(text)
    if not match:
        return None
    body = text[match.end():].strip()
    return body or None


def probe_job_blocks(text: str) -> Optional[str]:
    """Return only the paragraphs that carry job keywords."""
    blocks = [b.strip() for b in re.split(r"\n\s*\n", text) if b.strip()]
    if len(blocks) < 2:
        return None
    kept = [b for b in blocks if count_job_keywords(b) > 0]
    if not kept or len(kept) == len(blocks):
        return None
    return "\n\n".join(kept)


def probe_whole_text(text: str) -> Optional[str]:
    text = text.strip()
    return text or None


DEFAULT_PROBES = [probe_description_heading, probe_job_blocks, probe_whole_text]


def locate_posting_text(text: str, probes: Optional[Sequence[Probe]] = None) -> Optional[str]:
    """
    Locate the posting body using ordered fallback probes.

    Each probe may return None; the first non-empty result wins and later
    probes are not evaluated.

    Args:
        text: Full extracted page text
        probes: Probes to try in order (DEFAULT_PROBES if omitted)

    Returns:
        Located text, or None if every probe failed
    """
    if not text:
        return None

    for probe in (probes if probes is not None else DEFAULT_PROBES):
        result = probe(text)
        if result:
            return result

    return None


def content_fingerprint(text: str) -> str:
    """
    Hash cleaned text so callers can skip re-analyzing unchanged content.

    Args:
        text: Text to fingerprint

    Returns:
        Hex SHA-256 digest of the cleaned text
    """
    return hashlib.sha256(clean_posting_text(text).encode("utf-8")).hexdigest()


def split_postings(text: str, separator: str = "\n---\n") -> List[str]:
    """Split a multi-posting file into individual posting texts."""
    return [part.strip() for part in text.split(separator) if part.strip()]
