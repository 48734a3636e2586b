"""Data models for Lens Reviewer."""

from lens_reviewer.models.findings import (
    CONFIDENCE_THRESHOLD,
    Finding,
    GeneralFinding,
    GeneralSeverity,
)
from lens_reviewer.models.review import FALLBACK_SOURCE, DomainReview, GeneralReview, Report
from lens_reviewer.models.sources import SourceFile

__all__ = [
    "CONFIDENCE_THRESHOLD",
    "DomainReview",
    "FALLBACK_SOURCE",
    "Finding",
    "GeneralFinding",
    "GeneralReview",
    "GeneralSeverity",
    "Report",
    "SourceFile",
]
