"""Inline general review used when no delegate capability resolves.

Covers the reduced general scope: logic errors, duplication, naming,
resource leaks and test coverage gaps. Heuristics are line based and
language aware only where comment or declaration syntax differs.
"""

import logging
import re
from collections.abc import Iterator

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.lenses.base import indent_of, strip_comment
from lens_reviewer.models.findings import GeneralFinding, GeneralSeverity
from lens_reviewer.models.sources import SourceFile

logger = logging.getLogger(__name__)

BRACE_LANGUAGES = {".cs", ".ts", ".tsx", ".js", ".jsx"}

_NONE_COMPARE = re.compile(r"[=!]=\s*None\b")
_ASSIGN_IN_CONDITION = re.compile(r"\b(if|while)\s*\(\s*[\w.]+\s*=\s*[^=>]")
_SELF_COMPARE = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\s*(===|!==|==|!=)\s*\1(?![\w.(\[])")
_RETURN = re.compile(r"^\s*return\b")
_UNREACHABLE_EXEMPT = re.compile(
    r"^\s*(\}|\)|\]|case\b|default\b|else\b|elif\b|except\b|finally\b|catch\b|@|#|//)"
)

_PY_SHORT_NAME = re.compile(r"^\s*([A-Za-z])\s*(:\s*[\w\[\], |]+)?\s*=(?!=)")
_BRACE_SHORT_NAME = re.compile(
    r"\b(?:let|const|var|int|float|double|string|bool|long)\s+([A-Za-z])\s*[=:;]"
)
_LONG_NAME = re.compile(r"\b[A-Za-z_]\w{40,}\b")
_ALLOWED_SHORT = {"i", "j", "k", "x", "y", "z", "n", "_"}

_PY_OPEN = re.compile(r"(?<![\w.])open\(")
_CS_SUBSCRIBE = re.compile(r"([\w.]+)\s*\+=\s*(On\w+|Handle\w+|\([^)]*\)\s*=>|\w+\s*=>)")
_TS_LISTENER = re.compile(r"addEventListener\(\s*['\"](\w+)['\"]")
_TS_INTERVAL = re.compile(r"\bsetInterval\(")

DUPLICATE_WINDOW = 4
DUPLICATE_MIN_CHARS = 60


class LocalGeneralReviewer(GeneralReviewer):
    """Reduced-scope general review that never delegates further."""

    NAME = "local-fallback"
    FOCUS_AREAS = ["logic", "duplication", "naming", "leak", "test-coverage"]

    async def review(self, files: list[SourceFile]) -> list[GeneralFinding]:
        """Run every general check over ``files`` in a fixed order."""
        findings: list[GeneralFinding] = []
        for source in files:
            findings.extend(self._logic_errors(source))
        findings.extend(self._duplication(files))
        for source in files:
            findings.extend(self._naming(source))
        for source in files:
            findings.extend(self._leaks(source))
        findings.extend(self._coverage_gaps(files))

        logger.info(f"Local general review: {len(findings)} findings in {len(files)} files")
        return findings

    # --- Logic errors ---

    def _logic_errors(self, source: SourceFile) -> Iterator[GeneralFinding]:
        lines = source.numbered_lines()
        for index, (number, text) in enumerate(lines):
            code = strip_comment(source, text)
            if source.suffix == ".py" and _NONE_COMPARE.search(code):
                yield GeneralFinding(
                    category="logic",
                    severity=GeneralSeverity.MEDIUM,
                    file_path=source.path,
                    line=number,
                    description="Comparison to None with an equality operator",
                    remediation="Use `is None` / `is not None`",
                )
            if source.suffix in BRACE_LANGUAGES and _ASSIGN_IN_CONDITION.search(code):
                yield GeneralFinding(
                    category="logic",
                    severity=GeneralSeverity.HIGH,
                    file_path=source.path,
                    line=number,
                    description="Assignment inside a condition",
                    remediation="Use a comparison operator or move the assignment out",
                )
            if _SELF_COMPARE.search(code):
                yield GeneralFinding(
                    category="logic",
                    severity=GeneralSeverity.HIGH,
                    file_path=source.path,
                    line=number,
                    description="Value compared with itself",
                    remediation="Compare against the intended operand",
                )
            if _RETURN.search(code) and self._ends_statement(source, code):
                unreachable = self._next_code_line(source, lines, index, indent_of(code))
                if unreachable is not None:
                    yield GeneralFinding(
                        category="logic",
                        severity=GeneralSeverity.MEDIUM,
                        file_path=source.path,
                        line=unreachable,
                        description="Unreachable code after return",
                        remediation="Remove the dead statements or fix the control flow",
                    )

    def _ends_statement(self, source: SourceFile, code: str) -> bool:
        stripped = code.rstrip()
        if source.suffix in BRACE_LANGUAGES:
            return stripped.endswith(";")
        return not stripped.endswith(("(", "[", "{", ",", "\\"))

    def _next_code_line(
        self,
        source: SourceFile,
        lines: list[tuple[int, str]],
        index: int,
        indent: int,
    ) -> int | None:
        """Line number of a statement following a return in the same block, if any."""
        for number, text in lines[index + 1:]:
            code = strip_comment(source, text)
            if not code.strip():
                continue
            if indent_of(code) != indent or _UNREACHABLE_EXEMPT.search(code):
                return None
            return number
        return None

    # --- Duplication ---

    def _duplication(self, files: list[SourceFile]) -> Iterator[GeneralFinding]:
        seen: dict[tuple[str, ...], tuple[str, int]] = {}
        for source in files:
            significant = [
                (number, text.strip())
                for number, text in source.numbered_lines()
                if len(text.strip()) > 2
            ]
            position = 0
            while position + DUPLICATE_WINDOW <= len(significant):
                window = significant[position:position + DUPLICATE_WINDOW]
                key = tuple(text for _, text in window)
                if sum(len(text) for text in key) < DUPLICATE_MIN_CHARS:
                    position += 1
                    continue
                first = seen.get(key)
                if first is None:
                    seen[key] = (source.path, window[0][0])
                    position += 1
                    continue
                yield GeneralFinding(
                    category="duplication",
                    severity=GeneralSeverity.MEDIUM,
                    file_path=source.path,
                    line=window[0][0],
                    description=f"Block duplicates {first[0]}:{first[1]}",
                    remediation="Extract the shared logic into one function",
                )
                position += DUPLICATE_WINDOW

    # --- Naming ---

    def _naming(self, source: SourceFile) -> Iterator[GeneralFinding]:
        pattern = _PY_SHORT_NAME if source.suffix == ".py" else _BRACE_SHORT_NAME
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            short = pattern.search(code)
            if short and short.group(1) not in _ALLOWED_SHORT and not code.lstrip().startswith("for"):
                yield GeneralFinding(
                    category="naming",
                    severity=GeneralSeverity.LOW,
                    file_path=source.path,
                    line=number,
                    description=f"Single-letter name '{short.group(1)}' hides intent",
                    remediation="Use a descriptive name",
                )
            long_name = _LONG_NAME.search(code)
            if long_name:
                yield GeneralFinding(
                    category="naming",
                    severity=GeneralSeverity.LOW,
                    file_path=source.path,
                    line=number,
                    description=f"Identifier '{long_name.group(0)}' is over 40 characters",
                    remediation="Shorten the name; move detail into the enclosing scope",
                )

    # --- Leaks ---

    def _leaks(self, source: SourceFile) -> Iterator[GeneralFinding]:
        if source.suffix == ".py":
            yield from self._python_leaks(source)
        elif source.suffix == ".cs":
            yield from self._csharp_leaks(source)
        elif source.suffix in BRACE_LANGUAGES:
            yield from self._typescript_leaks(source)

    def _python_leaks(self, source: SourceFile) -> Iterator[GeneralFinding]:
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            if _PY_OPEN.search(code) and not re.match(r"^\s*(async\s+)?with\b", code):
                if re.match(r"^\s*def\s+open\(", code):
                    continue
                yield GeneralFinding(
                    category="leak",
                    severity=GeneralSeverity.HIGH,
                    file_path=source.path,
                    line=number,
                    description="File opened without a context manager",
                    remediation="Use `with open(...) as handle:`",
                )

    def _csharp_leaks(self, source: SourceFile) -> Iterator[GeneralFinding]:
        content = source.content
        for number, text in source.numbered_lines():
            match = _CS_SUBSCRIBE.search(strip_comment(source, text))
            if not match:
                continue
            target = match.group(1)
            if re.search(rf"{re.escape(target)}\s*-=", content):
                continue
            yield GeneralFinding(
                category="leak",
                severity=GeneralSeverity.HIGH,
                file_path=source.path,
                line=number,
                description=f"Subscription to {target} is never removed",
                remediation="Unsubscribe with -= in OnDisable or OnDestroy",
            )

    def _typescript_leaks(self, source: SourceFile) -> Iterator[GeneralFinding]:
        content = source.content
        for number, text in source.numbered_lines():
            code = strip_comment(source, text)
            listener = _TS_LISTENER.search(code)
            if listener and not re.search(
                rf"removeEventListener\(\s*['\"]{listener.group(1)}['\"]", content
            ):
                yield GeneralFinding(
                    category="leak",
                    severity=GeneralSeverity.HIGH,
                    file_path=source.path,
                    line=number,
                    description=f"'{listener.group(1)}' listener is never removed",
                    remediation="Call removeEventListener in the cleanup path",
                )
            if _TS_INTERVAL.search(code) and "clearInterval(" not in content:
                yield GeneralFinding(
                    category="leak",
                    severity=GeneralSeverity.HIGH,
                    file_path=source.path,
                    line=number,
                    description="Interval is never cleared",
                    remediation="Keep the handle and call clearInterval on teardown",
                )

    # --- Test coverage gaps ---

    def _coverage_gaps(self, files: list[SourceFile]) -> Iterator[GeneralFinding]:
        names = {_basename(source.path) for source in files}
        for source in files:
            if is_test_file(source.path) or _skip_for_coverage(source.path):
                continue
            expected = counterpart_test_names(source.path)
            if not expected or names.intersection(expected):
                continue
            yield GeneralFinding(
                category="test-coverage",
                severity=GeneralSeverity.LOW,
                file_path=source.path,
                line=1,
                description="Changed without an accompanying test change",
                remediation=f"Add or update {expected[0]}",
            )


def _basename(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


def _skip_for_coverage(path: str) -> bool:
    name = _basename(path)
    return name in {"__init__.py", "conftest.py", "setup.py"} or name.endswith(".d.ts")


def is_test_file(path: str) -> bool:
    """Whether ``path`` names a test module by common conventions."""
    name = _basename(path)
    return bool(
        re.match(r"^test_.*\.py$", name)
        or re.match(r"^.*_test\.py$", name)
        or re.match(r"^.*\.(test|spec)\.(ts|tsx|js|jsx)$", name)
        or re.match(r"^.*Tests?\.cs$", name)
    )


def counterpart_test_names(path: str) -> list[str]:
    """Conventional test file names for a source file, most common first."""
    name = _basename(path)
    stem, _, suffix = name.rpartition(".")
    if not stem:
        return []
    if suffix == "py":
        return [f"test_{stem}.py", f"{stem}_test.py"]
    if suffix in {"ts", "tsx", "js", "jsx"}:
        return [f"{stem}.test.{suffix}", f"{stem}.spec.{suffix}"]
    if suffix == "cs":
        return [f"{stem}Tests.cs", f"{stem}Test.cs"]
    return []
