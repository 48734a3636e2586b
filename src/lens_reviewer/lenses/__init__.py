"""Lens tables for each supported review domain."""

from lens_reviewer.lenses.base import Check, Detector, Domain, Lens
from lens_reviewer.lenses.python import PYTHON
from lens_reviewer.lenses.typescript import TYPESCRIPT
from lens_reviewer.lenses.unity import UNITY

DOMAINS: dict[str, Domain] = {domain.name: domain for domain in (UNITY, PYTHON, TYPESCRIPT)}


def get_domain(name: str) -> Domain:
    """Look up a domain table by name."""
    try:
        return DOMAINS[name]
    except KeyError:
        raise KeyError(
            f"Unknown domain '{name}' (available: {', '.join(sorted(DOMAINS))})"
        ) from None


__all__ = [
    "Check",
    "DOMAINS",
    "Detector",
    "Domain",
    "Lens",
    "PYTHON",
    "TYPESCRIPT",
    "UNITY",
    "get_domain",
]
