"""Report rendering as Markdown and JSON."""

from typing import Any

from lens_reviewer.models.findings import Finding, GeneralFinding, GeneralSeverity
from lens_reviewer.models.review import Report


def generate_summary(report: Report) -> str:
    """One-line summary of a report."""
    if not report.has_findings:
        return f"✅ No issues found in {len(report.files_reviewed)} files."

    parts = []
    if report.domain_findings:
        parts.append(f"🔍 {len(report.domain_findings)} {report.domain} findings")
    by_severity = report.general_by_severity
    if by_severity[GeneralSeverity.HIGH]:
        parts.append(f"🔴 {by_severity[GeneralSeverity.HIGH]} high")
    if by_severity[GeneralSeverity.MEDIUM]:
        parts.append(f"🟡 {by_severity[GeneralSeverity.MEDIUM]} medium")
    if by_severity[GeneralSeverity.LOW]:
        parts.append(f"💡 {by_severity[GeneralSeverity.LOW]} low")

    return f"Found {', '.join(parts)} across {len(report.files_reviewed)} files."


class MarkdownFormatter:
    """Formats a combined report as a Markdown document."""

    def __init__(self, include_metadata: bool = True) -> None:
        self.include_metadata = include_metadata

    def format_report(self, report: Report) -> str:
        """Render the report.

        The Domain Findings, General Findings and Passed Checks sections are
        always emitted, with a placeholder when empty.
        """
        lines = [f"# {report.title}", "", generate_summary(report), ""]

        if self.include_metadata:
            general = (
                f"`{report.general_source}` (delegated)"
                if report.delegated
                else "local fallback"
            )
            lines.append(
                f"**Reviewer:** {report.reviewer} | **Domain:** {report.domain} | "
                f"**General review:** {general}"
            )
            lines.append("")

        lines.append("## Domain Findings")
        lines.append("")
        if report.domain_findings:
            lines.extend(
                self._format_domain_finding(i, f)
                for i, f in enumerate(report.domain_findings, 1)
            )
        else:
            lines.append("_No findings._")
        lines.append("")

        lines.append("## General Findings")
        lines.append("")
        if report.general_findings:
            lines.extend(
                self._format_general_finding(i, f)
                for i, f in enumerate(report.general_findings, 1)
            )
        else:
            lines.append("_No findings._")
        lines.append("")

        lines.append("## Passed Checks")
        lines.append("")
        if report.passed_checks:
            lines.extend(f"- {check}" for check in report.passed_checks)
        else:
            lines.append("_None._")

        return "\n".join(lines) + "\n"

    def _format_domain_finding(self, index: int, finding: Finding) -> str:
        return (
            f"{index}. [{finding.category}] {finding.description} - "
            f"`{finding.locator}` - Fix: {finding.remediation} "
            f"(confidence {finding.confidence})"
        )

    def _format_general_finding(self, index: int, finding: GeneralFinding) -> str:
        return (
            f"{index}. [{finding.category}] {finding.description} - "
            f"`{finding.locator}` - Fix: {finding.remediation} "
            f"({finding.severity.value})"
        )


def format_report_as_json(report: Report) -> dict[str, Any]:
    """Convert a report to a JSON-serializable dict."""
    return {
        "title": report.title,
        "reviewer": report.reviewer,
        "domain": report.domain,
        "created_at": report.created_at.isoformat(),
        "summary": generate_summary(report),
        "general_source": report.general_source,
        "delegated": report.delegated,
        "files_reviewed": report.files_reviewed,
        "review_time_ms": report.review_time_ms,
        "domain_findings": [
            {
                "category": f.category,
                "confidence": f.confidence,
                "file_path": f.file_path,
                "line": f.line,
                "description": f.description,
                "remediation": f.remediation,
                "rule_id": f.rule_id,
            }
            for f in report.domain_findings
        ],
        "general_findings": [
            {
                "category": f.category,
                "severity": f.severity.value,
                "file_path": f.file_path,
                "line": f.line,
                "description": f.description,
                "remediation": f.remediation,
            }
            for f in report.general_findings
        ],
        "passed_checks": report.passed_checks,
    }
