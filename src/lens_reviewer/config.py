"""Configuration loading and validation for Lens Reviewer."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lens_reviewer.agents.definitions import (
    DefinitionError,
    all_definitions,
    load_definitions,
)
from lens_reviewer.agents.llm_client import DEFAULT_BASE_URL
from lens_reviewer.models.capability import CAPABILITY_NAME

DEFAULT_CONFIG_FILES = ("lens-reviewer.yaml", "lens-reviewer.example.yaml")
OUTPUT_FORMATS = ("markdown", "json")


@dataclass
class ReviewSettings:
    """Which agent runs and where definitions live."""

    default_agent: str = "python-reviewer"
    agents_dir: str | None = None
    recursive: bool = True


@dataclass
class DelegationSettings:
    """General-review delegation configuration."""

    enabled: bool = True
    target: str | None = None  # overrides the agent definition's delegate
    timeout_seconds: float = 120


@dataclass
class LLMSettings:
    """Chat-completions capability configuration."""

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    model: str = "gpt-4o-mini"
    timeout_seconds: int = 120
    capability: str = "code-review:code-reviewer"

    @property
    def enabled(self) -> bool:
        """The LLM capability is registered only when a key is configured."""
        return bool(self.api_key)


@dataclass
class OutputSettings:
    """Output configuration."""

    format: str = "markdown"
    include_metadata: bool = True


@dataclass
class Config:
    """Complete application configuration."""

    review: ReviewSettings = field(default_factory=ReviewSettings)
    delegation: DelegationSettings = field(default_factory=DelegationSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file (default: lens-reviewer.yaml)

    Returns:
        Loaded configuration
    """
    # Find config file
    if config_path is None:
        for candidate in DEFAULT_CONFIG_FILES:
            config_path = Path(candidate)
            if config_path.exists():
                break

    # Load from file if exists
    raw_config: dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}

    # Expand environment variables
    raw_config = _expand_env_vars(raw_config)

    # Parse configuration
    return _parse_config(raw_config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in config."""
    if isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            env_var = obj[2:-1]
            return os.environ.get(env_var, "")
        return obj
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _parse_config(raw: dict[str, Any]) -> Config:
    """Parse raw config dict into Config object."""
    # Review settings
    review_raw = raw.get("review", {})
    review = ReviewSettings(
        default_agent=review_raw.get("default_agent", "python-reviewer"),
        agents_dir=review_raw.get("agents_dir") or None,
        recursive=review_raw.get("recursive", True),
    )

    # Delegation settings
    delegation_raw = raw.get("delegation", {})
    delegation = DelegationSettings(
        enabled=delegation_raw.get("enabled", True),
        target=delegation_raw.get("target") or None,
        timeout_seconds=delegation_raw.get("timeout_seconds", 120),
    )

    # LLM capability
    llm_raw = raw.get("llm", {})
    llm = LLMSettings(
        api_key=llm_raw.get("api_key") or os.environ.get("LENS_REVIEWER_API_KEY", ""),
        base_url=llm_raw.get("base_url", DEFAULT_BASE_URL),
        model=llm_raw.get("model", "gpt-4o-mini"),
        timeout_seconds=llm_raw.get("timeout_seconds", 120),
        capability=llm_raw.get("capability", "code-review:code-reviewer"),
    )

    # Output settings
    out_raw = raw.get("output", {})
    output = OutputSettings(
        format=out_raw.get("format", "markdown"),
        include_metadata=out_raw.get("include_metadata", True),
    )

    return Config(
        review=review,
        delegation=delegation,
        llm=llm,
        output=output,
    )


def _is_positive_number(value: Any) -> bool:
    # An empty YAML value parses to None; booleans are ints to isinstance
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if config.delegation.target and not CAPABILITY_NAME.match(config.delegation.target):
        errors.append(
            f"delegation.target ({config.delegation.target}) must look like plugin-name:agent-name"
        )

    if not _is_positive_number(config.delegation.timeout_seconds):
        errors.append("delegation.timeout_seconds must be positive")

    if not CAPABILITY_NAME.match(config.llm.capability or ""):
        errors.append(
            f"llm.capability ({config.llm.capability}) must look like plugin-name:agent-name"
        )

    if not _is_positive_number(config.llm.timeout_seconds):
        errors.append("llm.timeout_seconds must be positive")

    if config.output.format not in OUTPUT_FORMATS:
        errors.append(
            f"output.format ({config.output.format}) must be one of: {', '.join(OUTPUT_FORMATS)}"
        )

    extra = {}
    if config.review.agents_dir:
        try:
            extra = load_definitions(Path(config.review.agents_dir))
        except DefinitionError as e:
            errors.append(f"Invalid agent definition: {e}")

    if config.review.default_agent not in all_definitions(extra):
        errors.append(f"review.default_agent ({config.review.default_agent}) is not defined")

    return errors
