"""Finding models for code review results."""

from dataclasses import dataclass
from enum import Enum

# Identical for every reviewer definition; not configurable.
CONFIDENCE_THRESHOLD = 80


class GeneralSeverity(Enum):
    """Severity labels used by general (domain-agnostic) reviewers.

    - HIGH: Likely bug or leak; fix before merge.
    - MEDIUM: Maintainability problem worth addressing.
    - LOW: Minor naming or coverage note.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Finding:
    """A single scored finding from a domain review pass."""

    category: str
    confidence: int  # 0 - 100
    file_path: str
    line: int
    description: str
    remediation: str
    rule_id: str = ""

    def __post_init__(self) -> None:
        """Validate finding data."""
        if isinstance(self.confidence, bool) or not isinstance(self.confidence, int):
            raise ValueError(f"Confidence must be an integer, got {self.confidence!r}")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be between 0 and 100, got {self.confidence}")
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")

    @property
    def locator(self) -> str:
        """File and line in ``path:line`` form."""
        return f"{self.file_path}:{self.line}"

    @property
    def passes_threshold(self) -> bool:
        return self.confidence >= CONFIDENCE_THRESHOLD


@dataclass(frozen=True)
class GeneralFinding:
    """A finding from a general reviewer, labelled by severity instead of confidence."""

    category: str
    severity: GeneralSeverity
    file_path: str
    line: int
    description: str
    remediation: str

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")

    @property
    def locator(self) -> str:
        return f"{self.file_path}:{self.line}"
