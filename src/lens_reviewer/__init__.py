"""Lens Reviewer - layered domain code review with general-review delegation."""

__version__ = "0.1.0"
