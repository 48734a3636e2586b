"""Symbolic capability names (``plugin-name:agent-name``)."""

import re

CAPABILITY_NAME = re.compile(r"^[a-z0-9][a-z0-9._-]*:[a-z0-9][a-z0-9._-]*$")


class InvalidCapabilityName(ValueError):
    """Raised when a capability name is not in ``plugin-name:agent-name`` form."""

    pass


def validate_capability_name(name: str) -> str:
    """Return ``name`` unchanged if well formed.

    Raises:
        InvalidCapabilityName: If the name does not match ``plugin-name:agent-name``
    """
    if not isinstance(name, str) or not CAPABILITY_NAME.match(name):
        raise InvalidCapabilityName(
            f"Capability name must look like 'plugin-name:agent-name', got {name!r}"
        )
    return name


def split_capability_name(name: str) -> tuple[str, str]:
    """Split a validated name into ``(plugin, agent)``."""
    plugin, _, agent = validate_capability_name(name).partition(":")
    return plugin, agent
