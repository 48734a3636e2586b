"""Review result models."""

from dataclasses import dataclass, field
from datetime import datetime

from lens_reviewer.models.findings import Finding, GeneralFinding, GeneralSeverity

# Value of GeneralReview.source when the inline fallback produced the findings
FALLBACK_SOURCE = "fallback"


@dataclass
class DomainReview:
    """Output of one domain review pass."""

    reviewer: str
    domain: str
    findings: list[Finding]
    passed_checks: list[str]
    candidate_count: int = 0
    review_time_ms: int = 0

    @property
    def dropped_count(self) -> int:
        """Number of candidates discarded by the confidence threshold."""
        return self.candidate_count - len(self.findings)


@dataclass
class GeneralReview:
    """Output of the general review phase, from whichever path fired."""

    source: str  # capability name, or FALLBACK_SOURCE
    findings: list[GeneralFinding]
    review_time_ms: int = 0

    @property
    def delegated(self) -> bool:
        """True when a registered capability produced the findings."""
        return self.source != FALLBACK_SOURCE


@dataclass
class Report:
    """Combined output of one review cycle."""

    title: str
    reviewer: str
    domain: str
    created_at: datetime

    # Results
    domain_findings: list[Finding]
    general_findings: list[GeneralFinding]
    passed_checks: list[str]

    # Metadata
    general_source: str
    files_reviewed: list[str] = field(default_factory=list)
    review_time_ms: int = 0

    @property
    def total_findings(self) -> int:
        """Total number of findings across both sections."""
        return len(self.domain_findings) + len(self.general_findings)

    @property
    def has_findings(self) -> bool:
        return self.total_findings > 0

    @property
    def delegated(self) -> bool:
        return self.general_source != FALLBACK_SOURCE

    @property
    def general_by_severity(self) -> dict[GeneralSeverity, int]:
        """Count general findings by severity label."""
        counts: dict[GeneralSeverity, int] = dict.fromkeys(GeneralSeverity, 0)
        for finding in self.general_findings:
            counts[finding.severity] += 1
        return counts
