"""LLM-backed general reviewer, registrable as a remote capability."""

import logging
from typing import Any

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.agents.llm_client import LLMClient
from lens_reviewer.models.findings import GeneralFinding, GeneralSeverity
from lens_reviewer.models.sources import SourceFile

logger = logging.getLogger(__name__)

# Prompt size limits
MAX_FILES = 20
MAX_FILE_CHARS = 5000


class LLMGeneralReviewer(GeneralReviewer):
    """Domain-agnostic quality review performed by a chat model."""

    NAME = "llm-general"
    FOCUS_AREAS = ["logic", "duplication", "naming", "leak", "test-coverage", "error-handling"]

    SYSTEM_PROMPT = """You are an experienced code reviewer performing a general quality pass.
A domain specialist has already reviewed these files for framework-specific issues;
you cover domain-agnostic concerns only.

Focus your review on:

1. **Logic Errors**
   - Off-by-one errors and wrong comparison operators
   - Missing null/None checks
   - Unreachable or dead code

2. **Duplication**
   - Copy-pasted blocks that should share one implementation

3. **Naming**
   - Names that hide intent or mislead

4. **Leaks**
   - Unclosed files, connections, subscriptions, timers

5. **Test Coverage Gaps**
   - Changed behavior without a matching test change

Only report issues you can point to in the code. Do not speculate.
"""

    def __init__(self, client: LLMClient, name: str | None = None) -> None:
        """Initialize the reviewer.

        Args:
            client: Chat-completions client
            name: Optional identifier (defaults to NAME)
        """
        self.client = client
        self._name = name or self.NAME

    @property
    def name(self) -> str:
        return self._name

    async def review(self, files: list[SourceFile]) -> list[GeneralFinding]:
        """Ask the model for general findings on ``files``."""
        response = await self.client.complete_json(
            system_prompt=self._get_system_prompt(),
            user_prompt=self._build_review_prompt(files),
            temperature=0.2,
        )
        findings = self._parse_findings(response)
        logger.info(f"{self.name}: {len(findings)} findings")
        return findings

    def _get_system_prompt(self) -> str:
        """Get the system prompt including the required answer format."""
        return f"""{self.SYSTEM_PROMPT}

You MUST respond with valid JSON in this exact format:
{{
    "findings": [
        {{
            "file_path": "path/to/file",
            "line": 10,
            "severity": "high|medium|low",
            "category": "logic|duplication|naming|leak|test-coverage",
            "description": "One line describing the issue",
            "remediation": "One line describing the fix"
        }}
    ],
    "summary": "Brief summary of the review"
}}

Rules:
- If the code is fine, return empty findings
- Focus on: {", ".join(self.focus_areas)}
"""

    def _build_review_prompt(self, files: list[SourceFile]) -> str:
        """Build the user prompt carrying the changed files."""
        files_str = "".join(f.to_prompt_block(MAX_FILE_CHARS) for f in files[:MAX_FILES])
        paths = "\n".join(f"- {f.path}" for f in files)
        return f"""## Changed Files
{paths}

## File Contents
{files_str}

Please review the files above for general quality issues.
"""

    def _parse_findings(self, response: dict[str, Any]) -> list[GeneralFinding]:
        """Parse findings from the model response, skipping malformed entries."""
        findings = []
        for raw in response.get("findings", []):
            try:
                findings.append(
                    GeneralFinding(
                        category=str(raw.get("category") or "general").lower(),
                        severity=GeneralSeverity(str(raw["severity"]).lower()),
                        file_path=raw["file_path"],
                        line=int(raw.get("line") or raw.get("line_start") or 1),
                        description=raw["description"],
                        remediation=raw.get("remediation") or raw.get("suggested_fix") or "",
                    )
                )
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to parse finding: {e}, raw: {raw}")
                continue
        return findings
