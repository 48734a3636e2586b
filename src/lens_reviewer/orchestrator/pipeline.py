"""Review pipeline: domain pass, delegation, then combination."""

import logging
from dataclasses import dataclass

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.agents.definitions import AgentDefinition
from lens_reviewer.agents.domain import DomainReviewer
from lens_reviewer.models.review import Report
from lens_reviewer.models.sources import SourceFile
from lens_reviewer.orchestrator.combiner import ReportCombiner
from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
from lens_reviewer.orchestrator.registry import CapabilityRegistry

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for one pipeline run."""

    delegation_enabled: bool = True
    target_override: str | None = None
    delegate_timeout_seconds: float = 120


class ReviewPipeline:
    """Runs one review cycle for an agent definition."""

    def __init__(
        self,
        definition: AgentDefinition,
        registry: CapabilityRegistry | None = None,
        config: PipelineConfig | None = None,
        fallback: GeneralReviewer | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            definition: Reviewer profile to run
            registry: Capabilities available for delegation (empty if omitted)
            config: Optional run configuration
            fallback: Optional replacement for the inline general reviewer
        """
        self.definition = definition
        self.registry = registry or CapabilityRegistry()
        self.config = config or PipelineConfig()
        self.domain_reviewer = DomainReviewer(definition)
        self.dispatcher = DelegationDispatcher(
            self.registry,
            fallback=fallback,
            timeout_seconds=self.config.delegate_timeout_seconds,
        )
        self.combiner = ReportCombiner()

    @property
    def delegate_target(self) -> str | None:
        """Capability the general phase will try, or None for fallback only."""
        if not self.config.delegation_enabled:
            return None
        return self.config.target_override or self.definition.delegate

    async def run(self, files: list[SourceFile]) -> Report:
        """Review ``files`` and return the combined report.

        The domain pass always runs first; the general phase always produces
        findings from either the delegate or the fallback.
        """
        logger.info(f"Starting {self.definition.name} review of {len(files)} files")

        domain_review = self.domain_reviewer.review(files)
        general_review = await self.dispatcher.dispatch(self.delegate_target, files)

        return self.combiner.combine(
            domain_review,
            general_review,
            files=files,
            title=f"{self.definition.name} report",
        )
