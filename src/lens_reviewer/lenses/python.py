"""Python lens table."""

from lens_reviewer.lenses.base import (
    Check,
    Domain,
    Lens,
    followed_by,
    in_python_block,
    line_pattern,
    long_lines,
)

ASYNC_DEF = r"^\s*async\s+def\s+\w+"
LOOP = r"^\s*(async\s+)?(for|while)\b"

TYPE_SAFETY = Lens(
    name="type-safety",
    description="Annotation coverage and suppressed type errors",
    checks=(
        Check(
            rule_id="PY-TYPE-001",
            description="Public function lacks a return type annotation",
            remediation="Annotate the return type, using -> None for procedures",
            confidence=82,
            detect=line_pattern(r"^\s*(async\s+)?def\s+(?!_)\w+\(.*\)\s*:\s*$"),
        ),
        Check(
            rule_id="PY-TYPE-002",
            description="Blanket type: ignore hides every error on the line",
            remediation="Scope the ignore with an error code, e.g. # type: ignore[attr-defined]",
            confidence=85,
            detect=line_pattern(r"#\s*type:\s*ignore(?!\[)", keep_comments=True),
        ),
        Check(
            rule_id="PY-TYPE-003",
            description="Any annotation opts out of type checking",
            remediation="Use a precise type, a TypeVar, or object",
            confidence=60,
            detect=line_pattern(r"(:\s*|->\s*)Any\b"),
        ),
    ),
)

STYLE = Lens(
    name="style",
    description="PEP 8 compliance and idiomatic comparisons",
    checks=(
        Check(
            rule_id="PY-STYLE-001",
            description="Wildcard import pollutes the module namespace",
            remediation="Import the names you use explicitly",
            confidence=90,
            detect=line_pattern(r"^\s*from\s+[\w.]+\s+import\s+\*"),
        ),
        Check(
            rule_id="PY-STYLE-002",
            description="Comparison to a boolean literal",
            remediation="Use the value directly, or `is True` when identity matters",
            confidence=88,
            detect=line_pattern(r"[=!]=\s*(True|False)\b"),
        ),
        Check(
            rule_id="PY-STYLE-003",
            description="Line exceeds 120 characters",
            remediation="Wrap the expression or extract a helper",
            confidence=85,
            detect=long_lines(120),
        ),
        Check(
            rule_id="PY-STYLE-004",
            description="print() left in library code",
            remediation="Use the logging module",
            confidence=55,
            detect=line_pattern(r"^\s*print\("),
        ),
    ),
)

ERROR_HANDLING = Lens(
    name="error-handling",
    description="Exception scope and propagation",
    checks=(
        Check(
            rule_id="PY-ERR-001",
            description="Bare except catches SystemExit and KeyboardInterrupt",
            remediation="Catch a specific exception class, or Exception at most",
            confidence=95,
            detect=line_pattern(r"^\s*except\s*:"),
        ),
        Check(
            rule_id="PY-ERR-002",
            description="Exception swallowed silently",
            remediation="Log the exception or re-raise it",
            confidence=92,
            detect=followed_by(r"^\s*except\b.*:\s*$", r"^\s*pass\s*$"),
        ),
        Check(
            rule_id="PY-ERR-003",
            description="Exception re-raised inside a handler without chaining",
            remediation="Use `raise NewError(...) from exc`",
            confidence=70,
            detect=in_python_block(r"^\s*except\b", r"^\s*raise\s+\w+(\.\w+)*\((?!.*\bfrom\b).*$"),
        ),
    ),
)

ASYNC_CORRECTNESS = Lens(
    name="async-correctness",
    description="Blocking calls and orphaned tasks in coroutines",
    checks=(
        Check(
            rule_id="PY-ASYNC-001",
            description="time.sleep blocks the event loop inside a coroutine",
            remediation="Use await asyncio.sleep(...)",
            confidence=95,
            detect=in_python_block(ASYNC_DEF, r"\btime\.sleep\("),
        ),
        Check(
            rule_id="PY-ASYNC-002",
            description="Synchronous HTTP call inside a coroutine",
            remediation="Use an async client such as httpx.AsyncClient",
            confidence=90,
            detect=in_python_block(ASYNC_DEF, r"\brequests\.(get|post|put|patch|delete|head|request)\("),
        ),
        Check(
            rule_id="PY-ASYNC-003",
            description="Task created without keeping a reference",
            remediation="Store the task and await it, or add it to a TaskGroup",
            confidence=85,
            detect=line_pattern(r"^\s*(asyncio\.)?(create_task|ensure_future)\("),
        ),
        Check(
            rule_id="PY-ASYNC-004",
            description="asyncio.get_event_loop() is deprecated outside a running loop",
            remediation="Use asyncio.get_running_loop() or asyncio.run()",
            confidence=72,
            detect=line_pattern(r"\basyncio\.get_event_loop\(\)"),
        ),
    ),
)

PERFORMANCE = Lens(
    name="performance",
    description="Avoidable work in loops",
    checks=(
        Check(
            rule_id="PY-PERF-001",
            description="Regular expression compiled inside a loop",
            remediation="Compile the pattern once at module level",
            confidence=83,
            detect=in_python_block(LOOP, r"\bre\.compile\("),
        ),
        Check(
            rule_id="PY-PERF-002",
            description="DataFrame.iterrows is slow for row-wise work",
            remediation="Vectorize the operation or use itertuples()",
            confidence=81,
            detect=line_pattern(r"\.iterrows\(\)"),
        ),
        Check(
            rule_id="PY-PERF-003",
            description="Index-based iteration over a sequence",
            remediation="Iterate directly or use enumerate()",
            confidence=70,
            detect=line_pattern(r"\bfor\s+\w+\s+in\s+range\(\s*len\("),
        ),
    ),
)

PYTHON = Domain(
    name="python",
    suffixes=(".py",),
    lenses=(
        TYPE_SAFETY,
        STYLE,
        ERROR_HANDLING,
        ASYNC_CORRECTNESS,
        PERFORMANCE,
    ),
)
