"""Agent definitions: named reviewer profiles.

A definition names a domain, the ordered lenses to apply, and an optional
delegation target in ``plugin-name:agent-name`` form. Definitions are either
built in or loaded from Markdown files with YAML frontmatter::

    ---
    name: unity-reviewer
    description: Use after editing Unity C# scripts
    domain: unity
    lenses: [lifecycle, serialization, performance]
    delegate: code-review:code-reviewer
    ---
    Free-form instructions for the host.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lens_reviewer.lenses import DOMAINS
from lens_reviewer.models.capability import validate_capability_name

logger = logging.getLogger(__name__)

DEFAULT_DELEGATE = "code-review:code-reviewer"

_FRONTMATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)(.*)\Z", re.DOTALL)


class DefinitionError(Exception):
    """Raised when an agent definition is malformed."""

    pass


class UnknownAgentError(KeyError):
    """Raised when an agent name does not match any definition."""

    pass


@dataclass(frozen=True)
class AgentDefinition:
    """A named reviewer behavior profile."""

    name: str
    description: str
    domain: str
    lenses: tuple[str, ...]
    delegate: str | None = DEFAULT_DELEGATE
    instructions: str = ""
    source_path: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate names against the domain tables."""
        if not self.name:
            raise DefinitionError("Agent definition requires a name")
        domain = DOMAINS.get(self.domain)
        if domain is None:
            raise DefinitionError(
                f"{self.name}: unknown domain '{self.domain}' "
                f"(available: {', '.join(sorted(DOMAINS))})"
            )
        if not self.lenses:
            raise DefinitionError(f"{self.name}: at least one lens is required")
        unknown = [lens for lens in self.lenses if lens not in domain.lens_names]
        if unknown:
            raise DefinitionError(
                f"{self.name}: unknown lenses for {self.domain}: {', '.join(unknown)}"
            )
        if self.delegate is not None:
            try:
                validate_capability_name(self.delegate)
            except ValueError as e:
                raise DefinitionError(f"{self.name}: {e}") from e


def _builtin(name: str, domain: str, description: str) -> AgentDefinition:
    return AgentDefinition(
        name=name,
        description=description,
        domain=domain,
        lenses=tuple(DOMAINS[domain].lens_names),
    )


BUILTIN_DEFINITIONS: dict[str, AgentDefinition] = {
    d.name: d
    for d in (
        _builtin(
            "unity-reviewer",
            "unity",
            "Reviews recently modified Unity C# scripts for lifecycle, serialization, "
            "performance, memory, platform and editor/runtime issues",
        ),
        _builtin(
            "python-reviewer",
            "python",
            "Reviews recently modified Python modules for type safety, style, "
            "error handling, async correctness and performance",
        ),
        _builtin(
            "typescript-reviewer",
            "typescript",
            "Reviews recently modified TypeScript/React code for type safety, async "
            "patterns, framework rules, performance and accessibility",
        ),
    )
}


def parse_definition(text: str, source_path: str | None = None) -> AgentDefinition:
    """Parse a Markdown agent definition with YAML frontmatter.

    Raises:
        DefinitionError: If the frontmatter is missing or invalid
    """
    match = _FRONTMATTER.match(text.lstrip("\ufeff"))
    where = source_path or "<definition>"
    if not match:
        raise DefinitionError(f"{where}: missing YAML frontmatter")

    try:
        meta: Any = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise DefinitionError(f"{where}: invalid frontmatter: {e}") from e
    if not isinstance(meta, dict):
        raise DefinitionError(f"{where}: frontmatter must be a mapping")

    try:
        name = meta["name"]
        domain = meta["domain"]
    except KeyError as e:
        raise DefinitionError(f"{where}: missing required key {e}") from e

    lenses = meta.get("lenses")
    if isinstance(lenses, str):
        lenses = [part.strip() for part in lenses.split(",") if part.strip()]
    if not lenses and domain in DOMAINS:
        # Omitted lenses means the domain's full table
        lenses = DOMAINS[domain].lens_names

    return AgentDefinition(
        name=str(name),
        description=str(meta.get("description", "")).strip(),
        domain=str(domain),
        lenses=tuple(lenses or ()),
        delegate=meta.get("delegate", DEFAULT_DELEGATE) or None,
        instructions=match.group(2).strip(),
        source_path=source_path,
    )


def load_definition(path: Path) -> AgentDefinition:
    """Load one definition file."""
    return parse_definition(path.read_text(encoding="utf-8"), source_path=str(path))


def load_definitions(directory: Path) -> dict[str, AgentDefinition]:
    """Load every ``*.md`` definition in ``directory``.

    Files that fail to parse raise ``DefinitionError``; later files with a
    duplicate name replace earlier ones.
    """
    definitions: dict[str, AgentDefinition] = {}
    if not directory.is_dir():
        logger.debug(f"Agent directory {directory} does not exist")
        return definitions
    for path in sorted(directory.glob("*.md")):
        definition = load_definition(path)
        if definition.name in definitions:
            logger.warning(f"Duplicate agent '{definition.name}' in {path}, replacing")
        definitions[definition.name] = definition
    return definitions


def all_definitions(extra: dict[str, AgentDefinition] | None = None) -> dict[str, AgentDefinition]:
    """Built-in definitions overlaid with loaded ones."""
    merged = dict(BUILTIN_DEFINITIONS)
    merged.update(extra or {})
    return merged


def get_definition(
    name: str, extra: dict[str, AgentDefinition] | None = None
) -> AgentDefinition:
    """Resolve an agent by name.

    Raises:
        UnknownAgentError: If no definition has that name
    """
    definitions = all_definitions(extra)
    try:
        return definitions[name]
    except KeyError:
        raise UnknownAgentError(
            f"Unknown agent '{name}' (available: {', '.join(sorted(definitions))})"
        ) from None
