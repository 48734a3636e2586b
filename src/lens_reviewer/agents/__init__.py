"""Review agents for Lens Reviewer."""

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.agents.definitions import (
    BUILTIN_DEFINITIONS,
    AgentDefinition,
    DefinitionError,
    UnknownAgentError,
    get_definition,
    load_definitions,
)
from lens_reviewer.agents.domain import DomainReviewer, filter_findings
from lens_reviewer.agents.general import LocalGeneralReviewer
from lens_reviewer.agents.llm import LLMGeneralReviewer
from lens_reviewer.agents.llm_client import LLMClient, LLMConfig

__all__ = [
    "AgentDefinition",
    "BUILTIN_DEFINITIONS",
    "DefinitionError",
    "DomainReviewer",
    "GeneralReviewer",
    "LLMClient",
    "LLMConfig",
    "LLMGeneralReviewer",
    "LocalGeneralReviewer",
    "UnknownAgentError",
    "filter_findings",
    "get_definition",
    "load_definitions",
]
