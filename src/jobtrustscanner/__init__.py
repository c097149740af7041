"""
Job Trust Scanner.

Heuristic scam-likelihood scoring for free-text job postings.
"""

from .analyze import analyze_job, AnalysisResult, TrustAnalyzer, TrustLabel

__version__ = "0.1.0"

__all__ = [
    "analyze_job",
    "AnalysisResult",
    "TrustAnalyzer",
    "TrustLabel",
]
