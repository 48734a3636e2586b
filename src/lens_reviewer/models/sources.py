"""Source file models."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath


@dataclass(frozen=True)
class SourceFile:
    """A changed source file handed to reviewers."""

    path: str
    content: str
    _lines: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_lines", tuple(self.content.splitlines()))

    @property
    def lines(self) -> tuple[str, ...]:
        """Content split into lines (no line terminators)."""
        return self._lines

    @property
    def suffix(self) -> str:
        return PurePosixPath(self.path.replace("\\", "/")).suffix.lower()

    @property
    def stem(self) -> str:
        return PurePosixPath(self.path.replace("\\", "/")).stem

    def numbered_lines(self) -> list[tuple[int, str]]:
        """Lines paired with their 1-based line numbers."""
        return list(enumerate(self._lines, start=1))

    def to_prompt_block(self, max_chars: int = 5000) -> str:
        """Format the file for inclusion in an LLM prompt."""
        return f"\n### {self.path}\n```\n{self.content[:max_chars]}\n```\n"
