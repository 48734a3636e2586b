"""Domain review pass: applies a lens table to changed files."""

import logging
import time
from collections.abc import Iterable, Iterator

from lens_reviewer.agents.definitions import AgentDefinition
from lens_reviewer.lenses import Domain, Lens, get_domain
from lens_reviewer.models.findings import CONFIDENCE_THRESHOLD, Finding
from lens_reviewer.models.review import DomainReview
from lens_reviewer.models.sources import SourceFile

logger = logging.getLogger(__name__)


def filter_findings(candidates: Iterable[Finding]) -> list[Finding]:
    """Keep candidates at or above the confidence threshold.

    Kept findings are returned unmodified and in their original order.
    Everything below the threshold is discarded without being reported.
    """
    return [finding for finding in candidates if finding.confidence >= CONFIDENCE_THRESHOLD]


class DomainReviewer:
    """Runs the ordered lenses of one agent definition over a file set."""

    def __init__(self, definition: AgentDefinition, domain: Domain | None = None) -> None:
        """Initialize the reviewer.

        Args:
            definition: Agent definition naming the domain and lens order
            domain: Optional domain table (defaults to the definition's domain)
        """
        self.definition = definition
        self.domain = domain or get_domain(definition.domain)
        self.lenses: list[Lens] = [self.domain.get_lens(name) for name in definition.lenses]

    @property
    def name(self) -> str:
        return self.definition.name

    def candidates(self, lens: Lens, files: list[SourceFile]) -> Iterator[Finding]:
        """Yield every raw finding for one lens, before thresholding."""
        for source in files:
            for check in lens.checks:
                for line in check.run(source):
                    yield Finding(
                        category=lens.name,
                        confidence=check.confidence,
                        file_path=source.path,
                        line=line,
                        description=check.description,
                        remediation=check.remediation,
                        rule_id=check.rule_id,
                    )

    def review(self, files: list[SourceFile]) -> DomainReview:
        """Apply every lens to ``files`` and keep findings scoring >= 80.

        Args:
            files: Recently modified source files

        Returns:
            DomainReview with kept findings and the lenses that passed
        """
        start_time = time.monotonic()
        relevant = [f for f in files if f.suffix in self.domain.suffixes]

        findings: list[Finding] = []
        passed: list[str] = []
        candidate_count = 0

        for lens in self.lenses:
            raw = list(self.candidates(lens, relevant))
            candidate_count += len(raw)
            kept = filter_findings(raw)
            if kept:
                findings.extend(kept)
            else:
                passed.append(lens.name)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"Domain pass {self.name}: {len(findings)} findings across "
            f"{len(relevant)} {self.domain.name} files, {len(passed)} lenses passed"
        )

        return DomainReview(
            reviewer=self.name,
            domain=self.domain.name,
            findings=findings,
            passed_checks=passed,
            candidate_count=candidate_count,
            review_time_ms=elapsed_ms,
        )
