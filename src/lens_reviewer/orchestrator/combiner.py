"""Report combiner for domain and general review output."""

import logging
from datetime import datetime

from lens_reviewer.agents.domain import filter_findings
from lens_reviewer.models.review import DomainReview, GeneralReview, Report
from lens_reviewer.models.sources import SourceFile

logger = logging.getLogger(__name__)


class ReportCombiner:
    """Concatenates domain and general findings into one report.

    Findings are kept in the order each pass produced them. Overlapping
    issues reported by both passes appear in both sections; there is no
    deduplication, merging by file, or ranking.
    """

    def combine(
        self,
        domain_review: DomainReview,
        general_review: GeneralReview,
        files: list[SourceFile] | None = None,
        title: str | None = None,
    ) -> Report:
        """Build the combined report.

        Args:
            domain_review: Output of the domain pass
            general_review: Output of the general phase, from either path
            files: Files that were reviewed
            title: Optional report heading

        Returns:
            Report with domain, general and passed-check sections
        """
        domain_findings = filter_findings(domain_review.findings)
        total_time = domain_review.review_time_ms + general_review.review_time_ms

        report = Report(
            title=title or f"{domain_review.reviewer} report",
            reviewer=domain_review.reviewer,
            domain=domain_review.domain,
            created_at=datetime.now(),
            domain_findings=domain_findings,
            general_findings=list(general_review.findings),
            passed_checks=list(domain_review.passed_checks),
            general_source=general_review.source,
            files_reviewed=[f.path for f in files or []],
            review_time_ms=total_time,
        )
        logger.info(
            f"Combined report: {len(report.domain_findings)} domain, "
            f"{len(report.general_findings)} general ({report.general_source})"
        )
        return report
