"""
CLI entrypoint for Job Trust Scanner.

Provides command-line interface for scoring job postings.
"""

import sys
import os
import json
import argparse
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from jobtrustscanner.analyze import TrustAnalyzer, AnalysisResult, get_rule_table
from jobtrustscanner.config import (
    DEFAULT_REPORT_DIR,
    DEFAULT_EXPORT_DIR,
    load_effective_settings,
    resolve_config_path,
)
from jobtrustscanner.extract import clean_posting_text, locate_posting_text
from jobtrustscanner.scan import PostingScanner


def build_analyzer(config_path: Optional[str]):
    """
    Load settings and build the analyzer they describe.

    Returns:
        Tuple of (settings, analyzer)

    Raises:
        FileNotFoundError, ValueError, CatalogError, yaml.YAMLError: On bad configuration
    """
    settings = load_effective_settings(config_path)
    return settings, TrustAnalyzer(settings.build_catalog())


def print_result(result: AnalysisResult, source: str) -> None:
    """Print a single analysis as a badge line plus numbered reasons."""
    print(f"\n[{result.label.value.upper()}] {result.score}/100  {source}")
    print(f"   Color: {result.color}")

    if result.reasons:
        print("   Reasons:")
        for idx, reason in enumerate(result.reasons, 1):
            print(f"   {idx}. {reason}")


def print_summary(results: dict, scanned: list) -> None:
    """Print scan summary to console."""
    print("\n" + "=" * 60)
    print("SCAN SUMMARY")
    print("=" * 60)

    print(f"\nProcessed: {results['processed']}")
    print(f"[OK] High Trust: {results['high_trust']}")
    print(f"[WARN] Medium Trust: {results['medium_trust']}")
    print(f"[FAIL] Low Trust: {results['low_trust']}")
    print(f"[INFO] Duplicates reused: {results['duplicates']}")
    print(f"[INFO] Errors: {results['errors']}")

    if not scanned:
        return

    print("\n" + "-" * 60)
    print("PER-POSTING RESULTS:")
    print("-" * 60)

    for item in scanned:
        status_symbol = {
            "High Trust": "[OK]",
            "Medium Trust": "[WARN]",
            "Low Trust": "[FAIL]",
        }.get(item["label"], "[?]")

        print(f"\n{status_symbol} {item['source']} ({item['score']}/100, {item['label']})")
        print(f"   Mode: {item['mode']}")
        print(f"   Characters: {item['chars']}")

        if not item["is_job_posting"]:
            print("   Note: text does not look like a job posting")

        if item.get("duplicate_of"):
            print(f"   Duplicate of: {item['duplicate_of']}")

        for reason in item.get("reasons", []):
            print(f"   - {reason}")


def analyze_command(args) -> int:
    """
    Execute the analyze command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        _, analyzer = build_analyzer(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # CatalogError is a ValueError
        print(f"[ERROR] Failed to load configuration: {e}")
        return 1

    try:
        if args.file == "-":
            text = sys.stdin.read()
            source = "<stdin>"
        else:
            with open(args.file, "r", encoding="utf-8", errors="replace") as f:
                text = f.read()
            source = args.file
    except OSError as e:
        print(f"[ERROR] Failed to read posting: {e}")
        return 1

    if args.locate:
        text = locate_posting_text(text) or ""
    if args.clean:
        text = clean_posting_text(text)

    result = analyzer.analyze(text, include_reasons=not args.no_reasons)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_result(result, source)

    return 0


def scan_command(args) -> int:
    """
    Execute the scan command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        settings, analyzer = build_analyzer(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"[ERROR] Failed to load configuration: {e}")
        return 1

    config_path = resolve_config_path(args.config)
    if config_path:
        print(f"[OK] Loaded configuration from: {config_path}")
    else:
        print("[INFO] Using built-in rule weights")

    scanner = PostingScanner(
        analyzer=analyzer,
        detail_min_length=settings.detail_min_length,
        locate=args.locate,
    )

    try:
        print(f"\n[INFO] Starting scan (dry-run={args.dry_run})")

        scanned = scanner.scan_directory(
            args.directory,
            pattern=args.pattern,
            limit=args.limit,
            include_reasons=not args.no_reasons,
        )

        print_summary(scanner.results, scanned)

        if args.dry_run:
            print("\n[DRY-RUN] Skipping report and CSV export")
            return 0

        report_dir = args.report_dir or os.getenv("JOBTRUST_REPORT_DIR", DEFAULT_REPORT_DIR)
        report_path = scanner.write_report(scanned, report_dir)
        print(f"\n[REPORT] Report written to: {report_path}")

        if args.export_csv:
            export_dir = args.export_dir or os.getenv("JOBTRUST_EXPORT_DIR", DEFAULT_EXPORT_DIR)
            csv_path = scanner.export_to_csv(scanned, export_dir)
            if csv_path:
                print(f"[OK] Exported to: {csv_path}")

        return 0

    except KeyboardInterrupt:
        print("\n\n[INTERRUPTED] Scan cancelled by user")
        return 130

    except OSError as e:
        print(f"\n[ERROR] Scan failed: {e}")
        return 1


def rules_command(args) -> int:
    """
    Execute the rules command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        _, analyzer = build_analyzer(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"[ERROR] Failed to load configuration: {e}")
        return 1

    catalog = analyzer.catalog
    table = get_rule_table(catalog)

    print("\n" + "=" * 60)
    print("RULE TABLE")
    print("=" * 60)

    for entry in table:
        print(f"{entry['weight']:>4}  {entry['kind']:<10} {entry['key']:<24} {entry['label']}")

    print("\n" + "-" * 60)
    print(f"Reasons cap: {catalog.reasons_cap}")
    print(f"Short description below: {catalog.short_description_length} characters")
    print(f"Excessive caps above: {catalog.caps_run_limit} runs")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobtrustscanner",
        description="Job Trust Scanner - Heuristic scam scoring for job postings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Score one posting with reasons
  python -m jobtrustscanner analyze posting.txt

  # Score from stdin as JSON, card mode
  cat posting.txt | python -m jobtrustscanner analyze - --json --no-reasons

  # Scan a folder of postings and export CSV
  python -m jobtrustscanner scan data/postings --export-csv

  # Show the effective rule table
  python -m jobtrustscanner rules --config config/trust_rules.yaml

Environment Variables:
  JOBTRUST_CONFIG       Rule tuning file (default: config/trust_rules.yaml if present)
  JOBTRUST_REPORT_DIR   Report output directory (default: data/reports)
  JOBTRUST_EXPORT_DIR   CSV export directory (default: data/exports)
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Score a single job posting",
    )

    analyze_parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="Posting text file, or '-' for stdin (default: -)",
    )

    analyze_parser.add_argument(
        "--no-reasons",
        action="store_true",
        help="Card mode: score only, skip section and positive-signal checks",
    )

    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    analyze_parser.add_argument(
        "--clean",
        action="store_true",
        help="Collapse whitespace, drop repeated lines and similar-jobs sections first",
    )

    analyze_parser.add_argument(
        "--locate",
        action="store_true",
        help="Narrow page text to the posting body before scoring",
    )

    analyze_parser.add_argument(
        "--config",
        type=str,
        help="Path to trust_rules.yaml",
    )

    # scan command
    scan_parser = subparsers.add_parser(
        "scan",
        help="Score every posting file in a directory",
    )

    scan_parser.add_argument(
        "directory",
        help="Directory holding posting text files",
    )

    scan_parser.add_argument(
        "--pattern",
        type=str,
        default="*.txt",
        help="File glob to scan (default: *.txt)",
    )

    scan_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of postings to analyze",
    )

    scan_parser.add_argument(
        "--no-reasons",
        action="store_true",
        help="Score all postings in card mode",
    )

    scan_parser.add_argument(
        "--locate",
        action="store_true",
        help="Narrow page text to the posting body before scoring",
    )

    scan_parser.add_argument(
        "--report-dir",
        type=str,
        help=f"Report output directory (default: {DEFAULT_REPORT_DIR})",
    )

    scan_parser.add_argument(
        "--export-csv",
        action="store_true",
        help="Also export results to CSV",
    )

    scan_parser.add_argument(
        "--export-dir",
        type=str,
        help=f"CSV export directory (default: {DEFAULT_EXPORT_DIR})",
    )

    scan_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print results without writing report or CSV",
    )

    scan_parser.add_argument(
        "--config",
        type=str,
        help="Path to trust_rules.yaml",
    )

    # rules command
    rules_parser = subparsers.add_parser(
        "rules",
        help="Show the effective rule table",
    )

    rules_parser.add_argument(
        "--config",
        type=str,
        help="Path to trust_rules.yaml",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    # Load environment variables from .env file
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "analyze":
        return analyze_command(args)
    elif args.command == "scan":
        return scan_command(args)
    elif args.command == "rules":
        return rules_command(args)
    else:
        print(f"[ERROR] Unknown command: {args.command}")
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
