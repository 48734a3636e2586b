"""Base class for general (domain-agnostic) review strategies."""

from lens_reviewer.models.findings import GeneralFinding
from lens_reviewer.models.sources import SourceFile


class GeneralReviewer:
    """Base class for strategies the dispatcher can run for the general pass.

    Remote capabilities are registered by symbolic name; the local fallback
    is used directly when no registered capability resolves.
    """

    # Subclasses should override these
    NAME: str = "base"
    FOCUS_AREAS: list[str] = []

    @property
    def name(self) -> str:
        """Identifier used in logs and in the report's source line."""
        return self.NAME

    @property
    def focus_areas(self) -> list[str]:
        """General concerns this reviewer covers."""
        return self.FOCUS_AREAS

    async def review(self, files: list[SourceFile]) -> list[GeneralFinding]:
        """Review ``files`` and return general findings.

        Args:
            files: The same file set the domain pass reviewed

        Returns:
            Findings labelled high/medium/low
        """
        raise NotImplementedError
