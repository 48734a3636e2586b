"""Registry mapping symbolic capability names to general review strategies."""

import logging
from enum import Enum

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.models.capability import validate_capability_name

logger = logging.getLogger(__name__)


class NotAvailable(Enum):
    """Result of resolving a capability that is not registered."""

    TOKEN = "not-available"

    def __repr__(self) -> str:
        return "NOT_AVAILABLE"


NOT_AVAILABLE = NotAvailable.TOKEN


class CapabilityRegistry:
    """Maps ``plugin-name:agent-name`` to callable review strategies."""

    def __init__(self) -> None:
        self._capabilities: dict[str, GeneralReviewer] = {}

    def register(self, name: str, reviewer: GeneralReviewer, replace: bool = False) -> None:
        """Register ``reviewer`` under ``name``.

        Raises:
            InvalidCapabilityName: If ``name`` is not ``plugin-name:agent-name``
            ValueError: If the name is taken and ``replace`` is False
        """
        validate_capability_name(name)
        if name in self._capabilities and not replace:
            raise ValueError(f"Capability '{name}' is already registered")
        self._capabilities[name] = reviewer
        logger.debug(f"Registered capability {name} ({reviewer.name})")

    def unregister(self, name: str) -> None:
        """Remove ``name`` if present."""
        self._capabilities.pop(name, None)

    def resolve(self, name: str) -> GeneralReviewer | NotAvailable:
        """Look up a capability, returning NOT_AVAILABLE when it is absent."""
        return self._capabilities.get(name, NOT_AVAILABLE)

    def names(self) -> list[str]:
        """Registered capability names in registration order."""
        return list(self._capabilities)

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities

    def __len__(self) -> int:
        return len(self._capabilities)
