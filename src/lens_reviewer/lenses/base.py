"""Lens and check primitives shared by every domain table.

A lens is a named category of checklist criteria. Each check inside a lens
is a detector over one source file that yields the 1-based line numbers it
flags, plus the fixed confidence and remediation text reported for a hit.
"""

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from lens_reviewer.models.sources import SourceFile

Detector = Callable[[SourceFile], Iterable[int]]

_HASH_COMMENT = re.compile(r"(^|\s)#.*$")
_SLASH_COMMENT = re.compile(r"(^|\s)//.*$")


@dataclass(frozen=True)
class Check:
    """A single checklist item inside a lens."""

    rule_id: str
    description: str
    remediation: str
    confidence: int
    detect: Detector
    suffixes: tuple[str, ...] = ()

    def applies_to(self, source: SourceFile) -> bool:
        """Whether this check runs against the given file."""
        return not self.suffixes or source.suffix in self.suffixes

    def run(self, source: SourceFile) -> list[int]:
        """Return the sorted, unique lines flagged in ``source``."""
        if not self.applies_to(source):
            return []
        return sorted(set(self.detect(source)))


@dataclass(frozen=True)
class Lens:
    """A named category of review criteria."""

    name: str
    description: str
    checks: tuple[Check, ...]


@dataclass(frozen=True)
class Domain:
    """A language/framework domain and its ordered lens table."""

    name: str
    suffixes: tuple[str, ...]
    lenses: tuple[Lens, ...]

    @property
    def lens_names(self) -> list[str]:
        return [lens.name for lens in self.lenses]

    def get_lens(self, name: str) -> Lens:
        for lens in self.lenses:
            if lens.name == name:
                return lens
        raise KeyError(f"Domain '{self.name}' has no lens '{name}'")


def strip_comment(source: SourceFile, text: str) -> str:
    """Drop a trailing line comment using the file's comment syntax."""
    if source.suffix == ".py":
        return _HASH_COMMENT.sub("", text)
    return _SLASH_COMMENT.sub("", text)


def indent_of(text: str) -> int:
    return len(text) - len(text.lstrip())


# --- Detector builders ---


def line_pattern(pattern: str, unless: str | None = None, keep_comments: bool = False) -> Detector:
    """Flag every line matching ``pattern`` (and not ``unless``)."""
    pattern_re = re.compile(pattern)
    unless_re = re.compile(unless) if unless else None

    def detect(source: SourceFile) -> Iterator[int]:
        for number, text in source.numbered_lines():
            code = text if keep_comments else strip_comment(source, text)
            if pattern_re.search(code) and not (unless_re and unless_re.search(code)):
                yield number

    return detect


def in_brace_block(header: str, pattern: str) -> Detector:
    """Flag lines matching ``pattern`` inside a ``{ }`` block opened by ``header``.

    Used for C#/TypeScript bodies such as ``void Update()`` or ``for (...)``.
    """
    header_re = re.compile(header)
    pattern_re = re.compile(pattern)

    def detect(source: SourceFile) -> Iterator[int]:
        inside = False
        opened = False
        depth = 0
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            if not inside and header_re.search(code):
                inside, opened, depth = True, False, 0
            if not inside:
                continue
            if opened and pattern_re.search(code):
                yield number
            depth += code.count("{") - code.count("}")
            if "{" in code:
                opened = True
            if opened and depth <= 0:
                inside = False

    return detect


def in_python_block(header: str, pattern: str) -> Detector:
    """Flag lines matching ``pattern`` inside an indented block opened by ``header``."""
    header_re = re.compile(header)
    pattern_re = re.compile(pattern)

    def detect(source: SourceFile) -> Iterator[int]:
        block_indent: int | None = None
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            if not code.strip():
                continue
            if block_indent is not None and indent_of(code) <= block_indent:
                block_indent = None
            if block_indent is None:
                if header_re.search(code):
                    block_indent = indent_of(code)
                continue
            if pattern_re.search(code):
                yield number

    return detect


def outside_guard(pattern: str, guard: str, path_exempt: str) -> Detector:
    """Flag ``pattern`` lines that sit outside ``#if <guard>`` regions.

    Files whose path matches ``path_exempt`` are skipped entirely.
    """
    pattern_re = re.compile(pattern)
    exempt_re = re.compile(path_exempt)
    guard_re = re.compile(rf"^\s*#if\s+.*(?<![!\w]){guard}\b")
    open_re = re.compile(r"^\s*#if\b")
    close_re = re.compile(r"^\s*#endif\b")
    else_re = re.compile(r"^\s*#(else|elif)\b")
    elif_guard_re = re.compile(rf"^\s*#elif\s+.*(?<![!\w]){guard}\b")

    def detect(source: SourceFile) -> Iterator[int]:
        if exempt_re.search(source.path.replace("\\", "/")):
            return
        # Stack of booleans: True for a guard region
        stack: list[bool] = []
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            if open_re.search(code):
                stack.append(bool(guard_re.search(code)))
                continue
            if close_re.search(code):
                if stack:
                    stack.pop()
                continue
            if else_re.search(code):
                if stack:
                    stack[-1] = bool(elif_guard_re.search(code))
                continue
            if not any(stack) and pattern_re.search(code):
                yield number

    return detect


def long_lines(limit: int) -> Detector:
    """Flag lines longer than ``limit`` characters."""

    def detect(source: SourceFile) -> Iterator[int]:
        for number, text in source.numbered_lines():
            if len(text) > limit:
                yield number

    return detect


def followed_by(first: str, then: str) -> Detector:
    """Flag ``first`` lines whose next non-blank line matches ``then``."""
    first_re = re.compile(first)
    then_re = re.compile(then)

    def detect(source: SourceFile) -> Iterator[int]:
        pending: int | None = None
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            if not code.strip():
                continue
            if pending is not None and then_re.search(code):
                yield pending
            pending = number if first_re.search(code) else None

    return detect


def call_missing_argument(call: str, closing_arg: str) -> Detector:
    """Flag calls to ``call`` whose final argument does not match ``closing_arg``.

    Scans forward across lines until the call's parentheses balance, so
    multi-line calls such as ``useEffect(() => { ... })`` are handled.
    """
    call_re = re.compile(rf"\b{call}\s*\(")
    closing_re = re.compile(closing_arg + r"\s*$")

    def detect(source: SourceFile) -> Iterator[int]:
        lines = source.lines
        for index, text in enumerate(lines):
            match = call_re.search(strip_comment(source, text))
            if not match:
                continue
            depth = 0
            buffer: list[str] = []
            started = False
            for scan in range(index, len(lines)):
                chunk = strip_comment(source, lines[scan])
                if scan == index:
                    chunk = chunk[match.end() - 1:]
                closed = False
                for char in chunk:
                    if char == "(":
                        depth += 1
                        started = True
                        if depth == 1:
                            continue
                    elif char == ")":
                        depth -= 1
                        if started and depth == 0:
                            closed = True
                            break
                    buffer.append(char)
                if closed:
                    break
                buffer.append("\n")
            else:
                continue
            if not closing_re.search("".join(buffer).rstrip().rstrip(",")):
                yield index + 1

    return detect
