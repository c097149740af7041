"""
Shared fixtures for Job Trust Scanner tests.
"""

import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jobtrustscanner.analyze import TrustAnalyzer


WELL_FORMED_POSTING = (
    "Senior Data Analyst\n"
    "About Us: Northwind Analytics builds forecasting tools for regional grocery "
    "chains and has been growing steadily for over a decade.\n"
    "Responsibilities: Build weekly sales dashboards, partner with the merchandising "
    "team on pricing questions, and document the data models you create.\n"
    "Qualifications: Three years of analytics work, strong SQL, and comfort "
    "explaining results to non-technical colleagues.\n"
    "Benefits: health insurance, dental coverage, a 401k match and paid time off "
    "from your first month.\n"
    "To apply, share your resume through the careers page on our website."
)

SCAM_POSTING = "send payment now, wire transfer required, contact us on telegram"

PLAIN_POSTING = (
    "Warehouse associate needed for the evening shift at our Springfield location. "
    "Apply in person at the front desk any weekday afternoon."
)


@pytest.fixture
def analyzer():
    """Create analyzer with the default catalog."""
    return TrustAnalyzer()


@pytest.fixture
def well_formed_posting():
    return WELL_FORMED_POSTING


@pytest.fixture
def scam_posting():
    return SCAM_POSTING


@pytest.fixture
def plain_posting():
    return PLAIN_POSTING
