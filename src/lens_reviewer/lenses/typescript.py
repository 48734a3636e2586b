"""TypeScript lens table."""

from lens_reviewer.lenses.base import (
    Check,
    Domain,
    Lens,
    call_missing_argument,
    in_brace_block,
    line_pattern,
)

JSX = (".tsx", ".jsx")

TYPE_SAFETY = Lens(
    name="type-safety",
    description="Escapes from the type checker",
    checks=(
        Check(
            rule_id="TS-TYPE-001",
            description="Explicit any disables type checking",
            remediation="Use unknown or a precise type",
            confidence=88,
            detect=line_pattern(r"(:\s*any\b|\bas\s+any\b|<any>)"),
        ),
        Check(
            rule_id="TS-TYPE-002",
            description="@ts-ignore suppresses errors without explanation",
            remediation="Use @ts-expect-error with a reason",
            confidence=90,
            detect=line_pattern(r"@ts-ignore\b", keep_comments=True),
        ),
        Check(
            rule_id="TS-TYPE-003",
            description="Non-null assertion hides a possible undefined",
            remediation="Narrow the value with a check or optional chaining",
            confidence=78,
            detect=line_pattern(r"\w!\.\w"),
        ),
    ),
)

ASYNC_PATTERNS = Lens(
    name="async-patterns",
    description="Promise handling and awaiting",
    checks=(
        Check(
            rule_id="TS-ASYNC-001",
            description="forEach does not await async callbacks",
            remediation="Use for...of with await, or Promise.all with map",
            confidence=92,
            detect=line_pattern(r"\.forEach\(\s*async\b"),
        ),
        Check(
            rule_id="TS-ASYNC-002",
            description="async Promise executor loses thrown errors",
            remediation="Make the executor synchronous or drop the Promise wrapper",
            confidence=88,
            detect=line_pattern(r"\bnew\s+Promise\s*\(\s*async\b"),
        ),
        Check(
            rule_id="TS-ASYNC-003",
            description="fetch result neither awaited nor returned",
            remediation="await the call or return the promise",
            confidence=82,
            detect=line_pattern(r"^\s*fetch\s*\("),
        ),
        Check(
            rule_id="TS-ASYNC-004",
            description="Promise chain without a rejection handler",
            remediation="Add .catch() or switch to try/await",
            confidence=70,
            detect=line_pattern(r"\.then\(", unless=r"\.catch\(|^\s*return\b|\bawait\b"),
        ),
    ),
)

FRAMEWORK_RULES = Lens(
    name="framework-rules",
    description="React hook and rendering rules",
    checks=(
        Check(
            rule_id="TS-FW-001",
            description="useEffect without a dependency array runs after every render",
            remediation="Pass the dependency array explicitly",
            confidence=84,
            detect=call_missing_argument("useEffect", r"\]"),
            suffixes=JSX + (".ts",),
        ),
        Check(
            rule_id="TS-FW-002",
            description="Hook called conditionally",
            remediation="Call hooks unconditionally at the top level of the component",
            confidence=86,
            detect=in_brace_block(r"^\s*(if|else\s+if)\s*\(|^\s*else\b", r"\buse[A-Z]\w*\s*\("),
            suffixes=JSX + (".ts",),
        ),
        Check(
            rule_id="TS-FW-003",
            description="Array index used as a React key",
            remediation="Use a stable identifier from the item",
            confidence=81,
            detect=line_pattern(r"\bkey=\{\s*(index|idx|i)\s*\}"),
            suffixes=JSX,
        ),
        Check(
            rule_id="TS-FW-004",
            description="Direct DOM query inside a component",
            remediation="Use a ref",
            confidence=75,
            detect=line_pattern(r"\bdocument\.(getElementById|querySelector)\w*\("),
            suffixes=JSX,
        ),
    ),
)

PERFORMANCE = Lens(
    name="performance",
    description="Avoidable copying and serialized awaits",
    checks=(
        Check(
            rule_id="TS-PERF-001",
            description="Deep clone through a JSON round-trip",
            remediation="Use structuredClone()",
            confidence=83,
            detect=line_pattern(r"JSON\.parse\(\s*JSON\.stringify\("),
        ),
        Check(
            rule_id="TS-PERF-002",
            description="Sequential await inside a loop",
            remediation="Collect the promises and await Promise.all",
            confidence=80,
            detect=in_brace_block(r"^\s*for\s*\(", r"\bawait\b"),
        ),
        Check(
            rule_id="TS-PERF-003",
            description="Inline arrow function in a JSX prop re-creates on every render",
            remediation="Hoist the handler or wrap it in useCallback",
            confidence=60,
            detect=line_pattern(r"\bon[A-Z]\w*=\{\s*\([^)]*\)\s*=>"),
            suffixes=JSX,
        ),
    ),
)

ACCESSIBILITY = Lens(
    name="accessibility",
    description="Markup usable with assistive technology",
    checks=(
        Check(
            rule_id="TS-A11Y-001",
            description="Image without alt text",
            remediation="Add an alt attribute, empty for decorative images",
            confidence=90,
            detect=line_pattern(r"<img\b", unless=r"\balt="),
            suffixes=JSX,
        ),
        Check(
            rule_id="TS-A11Y-002",
            description="Clickable div without a role",
            remediation="Use a <button>, or add role and keyboard handlers",
            confidence=85,
            detect=line_pattern(r"<div\b[^>]*\bonClick=", unless=r"\brole="),
            suffixes=JSX,
        ),
        Check(
            rule_id="TS-A11Y-003",
            description="Positive tabIndex breaks natural focus order",
            remediation="Use tabIndex={0} or -1",
            confidence=82,
            detect=line_pattern(r"\btabIndex=\{?\s*[\"']?[1-9]"),
            suffixes=JSX,
        ),
        Check(
            rule_id="TS-A11Y-004",
            description="Anchor used as a button",
            remediation="Use a <button> element, or give the anchor an href",
            confidence=80,
            detect=line_pattern(r"<a\b[^>]*\bonClick=", unless=r"\bhref="),
            suffixes=JSX,
        ),
    ),
)

TYPESCRIPT = Domain(
    name="typescript",
    suffixes=(".ts", ".tsx"),
    lenses=(
        TYPE_SAFETY,
        ASYNC_PATTERNS,
        FRAMEWORK_RULES,
        PERFORMANCE,
        ACCESSIBILITY,
    ),
)
