"""Delegation dispatcher: named general reviewer with an inline fallback."""

import asyncio
import logging
import time

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.agents.general import LocalGeneralReviewer
from lens_reviewer.models.findings import GeneralFinding
from lens_reviewer.models.review import FALLBACK_SOURCE, GeneralReview
from lens_reviewer.models.sources import SourceFile
from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry, NotAvailable

logger = logging.getLogger(__name__)


class DelegationDispatcher:
    """Chooses between a registered general reviewer and the local fallback."""

    def __init__(
        self,
        registry: CapabilityRegistry,
        fallback: GeneralReviewer | None = None,
        timeout_seconds: float = 120,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Capabilities available for delegation
            fallback: Inline reviewer used when delegation is not possible
            timeout_seconds: Maximum time to wait for a delegate
        """
        self.registry = registry
        self.fallback = fallback or LocalGeneralReviewer()
        self.timeout_seconds = timeout_seconds

    async def try_delegate(
        self, target: str, files: list[SourceFile]
    ) -> list[GeneralFinding] | NotAvailable:
        """Invoke the named capability on ``files``.

        Findings from a resolved capability are returned verbatim. A missing
        capability, a timeout, a failing delegate or a malformed answer all
        yield NOT_AVAILABLE.
        """
        reviewer = self.registry.resolve(target)
        if reviewer is NOT_AVAILABLE:
            logger.info(f"Capability {target} not available")
            return NOT_AVAILABLE

        try:
            findings = await asyncio.wait_for(
                reviewer.review(files),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Capability {target} timed out after {self.timeout_seconds}s")
            return NOT_AVAILABLE
        except Exception as e:
            logger.warning(f"Capability {target} failed: {type(e).__name__}: {e}")
            return NOT_AVAILABLE

        if not isinstance(findings, (list, tuple)) or not all(
            isinstance(f, GeneralFinding) for f in findings
        ):
            logger.warning(
                f"Capability {target} returned {type(findings).__name__}, "
                "expected a list of GeneralFinding"
            )
            return NOT_AVAILABLE

        logger.info(f"Capability {target} returned {len(findings)} findings")
        return list(findings)

    async def local_review(self, files: list[SourceFile]) -> list[GeneralFinding]:
        """Run the inline reduced-scope general review."""
        return await self.fallback.review(files)

    async def dispatch(self, target: str | None, files: list[SourceFile]) -> GeneralReview:
        """Run the general phase, delegating when possible.

        Args:
            target: Capability name, or None to go straight to the fallback
            files: The same file set the domain pass reviewed

        Returns:
            GeneralReview naming the path that produced the findings
        """
        start_time = time.monotonic()

        if target is not None:
            delegated = await self.try_delegate(target, files)
            if delegated is not NOT_AVAILABLE:
                return GeneralReview(
                    source=target,
                    findings=delegated,
                    review_time_ms=int((time.monotonic() - start_time) * 1000),
                )
            logger.info(f"Falling back to {self.fallback.name} review")

        findings = await self.local_review(files)
        return GeneralReview(
            source=FALLBACK_SOURCE,
            findings=findings,
            review_time_ms=int((time.monotonic() - start_time) * 1000),
        )
