"""
Batch scanning for Job Trust Scanner.

Handles batch analysis of posting text files, JSON reports and CSV export.
"""

import os
import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

from .analyze import TrustAnalyzer, TrustLabel
from .config import DEFAULT_DETAIL_MIN_LENGTH
from .extract import (
    clean_posting_text,
    content_fingerprint,
    MAX_CARD_TEXT_LENGTH,
    is_likely_job_posting,
    locate_posting_text,
    split_postings,
)


SCANNER_VERSION = "1.0.0"

LABEL_COUNTERS = {
    TrustLabel.HIGH: "high_trust",
    TrustLabel.MEDIUM: "medium_trust",
    TrustLabel.LOW: "low_trust",
}


def _empty_counters() -> Dict[str, int]:
    return {
        "processed": 0,
        "high_trust": 0,
        "medium_trust": 0,
        "low_trust": 0,
        "duplicates": 0,
        "errors": 0,
    }


class PostingScanner:
    """
    Orchestrates posting analysis over a directory of text files.

    Features:
    - Card mode for short texts, detail mode (with reasons) for full postings
    - Content fingerprinting so identical postings are analyzed once
    - JSON report and CSV export with formula injection mitigation
    """

    def __init__(
        self,
        analyzer: Optional[TrustAnalyzer] = None,
        detail_min_length: int = DEFAULT_DETAIL_MIN_LENGTH,
        locate: bool = False,
    ):
        """
        Initialize scanner.

        Args:
            analyzer: Analyzer to use (default catalog if omitted)
            detail_min_length: Texts longer than this get reasons
            locate: Narrow each text to the posting body before analysis
        """
        self.analyzer = analyzer or TrustAnalyzer()
        self.detail_min_length = detail_min_length
        self.locate = locate
        self.results = _empty_counters()
        self._seen = {}

    def scan_text(
        self,
        text: str,
        source: str,
        include_reasons: bool = True,
    ) -> Dict[str, Any]:
        """
        Analyze one posting text and record it in the counters.

        Args:
            text: Raw posting text
            source: Label for where the text came from (file name, index)
            include_reasons: Allow detail mode; False forces card mode

        Returns:
            Dict describing the analysis
        """
        if self.locate:
            text = locate_posting_text(text) or ""
        cleaned = clean_posting_text(text)

        detail = include_reasons and len(cleaned) > self.detail_min_length
        fingerprint = content_fingerprint(cleaned)
        cache_key = (fingerprint, detail)

        duplicate_of = None
        if cache_key in self._seen:
            cached = self._seen[cache_key]
            duplicate_of = cached["source"]
            analysis = cached["analysis"]
            self.results["duplicates"] += 1
        else:
            analysis = self.analyzer.analyze(cleaned, include_reasons=detail).to_dict()
            self._seen[cache_key] = {"source": source, "analysis": analysis}

        self.results["processed"] += 1
        self.results[LABEL_COUNTERS[TrustLabel(analysis["label"])]] += 1

        return {
            "source": source,
            "mode": "detail" if detail else "card",
            "chars": len(cleaned),
            "is_job_posting": is_likely_job_posting(
                cleaned, max_length=None if detail else MAX_CARD_TEXT_LENGTH
            ),
            "fingerprint": fingerprint,
            "duplicate_of": duplicate_of,
            "text": cleaned,
            **analysis,
        }

    def scan_directory(
        self,
        directory: str,
        pattern: str = "*.txt",
        limit: Optional[int] = None,
        include_reasons: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Analyze every posting in the matching files of a directory.

        A file may hold several postings separated by a line of '---'.

        Args:
            directory: Directory to scan
            pattern: Glob for posting files
            limit: Maximum postings to analyze
            include_reasons: Allow detail mode

        Returns:
            List of per-posting result dicts
        """
        # Reset results
        self.results = _empty_counters()
        self._seen = {}

        root = Path(directory)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = sorted(p for p in root.glob(pattern) if p.is_file())
        print(f"\n[INFO] Scanning {len(files)} file(s) in {directory}")

        scanned = []
        for path in files:
            if limit is not None and len(scanned) >= limit:
                break

            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                print(f"   [WARN] Error reading {path.name}: {e}")
                self.results["errors"] += 1
                continue

            postings = split_postings(content) or [""]
            for idx, posting in enumerate(postings):
                if limit is not None and len(scanned) >= limit:
                    break
                source = path.name if len(postings) == 1 else f"{path.name}#{idx + 1}"
                scanned.append(self.scan_text(posting, source, include_reasons=include_reasons))

        return scanned

    def write_report(
        self,
        scanned: List[Dict[str, Any]],
        report_dir: str,
    ) -> str:
        """
        Write scan results to JSON report file.

        Args:
            scanned: Per-posting result dicts from scan_directory()
            report_dir: Directory to write report to

        Returns:
            Path to the created report file
        """
        report_path = Path(report_dir)
        report_path.mkdir(parents=True, exist_ok=True)

        # Generate timestamped filename
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        filepath = report_path / f"trust_scan_{timestamp}.json"

        report = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "scanner_version": SCANNER_VERSION,
            "summary": dict(self.results),
            "results": [
                {key: value for key, value in item.items() if key != "text"}
                for item in scanned
            ],
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return str(filepath)

    def export_to_csv(
        self,
        scanned: List[Dict[str, Any]],
        export_dir: str,
    ) -> Optional[str]:
        """
        Export scan results to CSV.

        Args:
            scanned: Per-posting result dicts from scan_directory()
            export_dir: Directory to write CSV file

        Returns:
            Path to CSV file or None if nothing was scanned
        """
        if not scanned:
            print("\n[INFO] No scanned postings to export")
            return None

        # Create export directory
        Path(export_dir).mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_path = os.path.join(export_dir, f"trust_scan_{timestamp}.csv")

        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL)

            writer.writerow([
                "source",
                "mode",
                "score",
                "label",
                "snippet",
                "reasons",
            ])

            for item in scanned:
                snippet = item.get("text") or ""
                snippet = snippet.replace("\n", " ").replace("\r", " ")
                snippet = snippet[:200]

                writer.writerow([
                    mitigate_formula_injection(item["source"]),
                    item["mode"],
                    item["score"],
                    item["label"],
                    mitigate_formula_injection(snippet),
                    mitigate_formula_injection("; ".join(item.get("reasons", []))),
                ])

        print(f"\n[EXPORT] Exported {len(scanned)} posting(s) to: {csv_path}")
        return csv_path


def mitigate_formula_injection(value: str) -> str:
    """
    Mitigate CSV formula injection by prefixing dangerous cells.

    Spreadsheet tools treat cells starting with =, +, -, @ as formulas.
    Prefix with single quote to treat as text.

    Args:
        value: Cell value

    Returns:
        Safe value
    """
    if not value:
        return value

    if value[0] in "=+-@":
        return f"'{value}"

    return value
