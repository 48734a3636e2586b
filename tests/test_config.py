"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from lens_reviewer.config import Config, load_config, validate_config

EXAMPLE_CONFIG = Path(__file__).parent.parent / "lens-reviewer.example.yaml"


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert config.review.default_agent == "python-reviewer"
        assert config.delegation.enabled is True
        assert config.delegation.target is None
        assert config.output.format == "markdown"
        assert config.llm.capability == "code-review:code-reviewer"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "lens-reviewer.yaml"
        path.write_text(
            "review:\n"
            "  default_agent: unity-reviewer\n"
            "  recursive: false\n"
            "delegation:\n"
            "  enabled: false\n"
            "  target: team-review:strict\n"
            "  timeout_seconds: 30\n"
            "output:\n"
            "  format: json\n"
            "  include_metadata: false\n"
        )

        config = load_config(path)

        assert config.review.default_agent == "unity-reviewer"
        assert config.review.recursive is False
        assert config.delegation.enabled is False
        assert config.delegation.target == "team-review:strict"
        assert config.delegation.timeout_seconds == 30
        assert config.output.format == "json"
        assert config.output.include_metadata is False

    def test_env_var_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_LLM_KEY", "sk-test")
        path = tmp_path / "lens-reviewer.yaml"
        path.write_text("llm:\n  api_key: ${TEST_LLM_KEY}\n  model: local-model\n")

        config = load_config(path)

        assert config.llm.api_key == "sk-test"
        assert config.llm.model == "local-model"
        assert config.llm.enabled

    def test_api_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LENS_REVIEWER_API_KEY", "sk-env")

        config = load_config(tmp_path / "missing.yaml")

        assert config.llm.api_key == "sk-env"

    def test_unset_env_var_disables_llm(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LENS_REVIEWER_API_KEY", raising=False)
        monkeypatch.delenv("UNSET_KEY", raising=False)
        path = tmp_path / "lens-reviewer.yaml"
        path.write_text("llm:\n  api_key: ${UNSET_KEY}\n")

        assert not load_config(path).llm.enabled

    def test_example_config(self, monkeypatch):
        monkeypatch.chdir(EXAMPLE_CONFIG.parent)

        config = load_config(EXAMPLE_CONFIG)

        assert config.review.agents_dir == "agents"
        assert validate_config(config) == []


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_valid(self):
        assert validate_config(Config()) == []

    def test_bad_delegation_target(self):
        config = Config()
        config.delegation.target = "not-a-capability"

        errors = validate_config(config)

        assert len(errors) == 1
        assert "delegation.target" in errors[0]

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout(self, timeout):
        config = Config()
        config.delegation.timeout_seconds = timeout

        assert any("timeout_seconds" in e for e in validate_config(config))

    @pytest.mark.parametrize("timeout", [None, "soon", True])
    def test_non_numeric_timeout(self, timeout):
        config = Config()
        config.llm.timeout_seconds = timeout

        errors = validate_config(config)

        assert errors == ["llm.timeout_seconds must be positive"]

    def test_empty_timeout_value_in_file(self, tmp_path):
        path = tmp_path / "lens-reviewer.yaml"
        path.write_text("delegation:\n  timeout_seconds:\n")

        config = load_config(path)

        assert config.delegation.timeout_seconds is None
        assert validate_config(config) == ["delegation.timeout_seconds must be positive"]

    def test_bad_output_format(self):
        config = Config()
        config.output.format = "html"

        assert any("output.format" in e for e in validate_config(config))

    def test_unknown_default_agent(self):
        config = Config()
        config.review.default_agent = "rust-reviewer"

        assert any("review.default_agent" in e for e in validate_config(config))

    def test_default_agent_from_agents_dir(self, tmp_path):
        (tmp_path / "mine.md").write_text("---\nname: mine\ndomain: python\n---\n")
        config = Config()
        config.review.agents_dir = str(tmp_path)
        config.review.default_agent = "mine"

        assert validate_config(config) == []

    def test_invalid_agent_file(self, tmp_path):
        (tmp_path / "bad.md").write_text("---\nname: bad\ndomain: cobol\n---\n")
        config = Config()
        config.review.agents_dir = str(tmp_path)

        errors = validate_config(config)

        assert any("Invalid agent definition" in e for e in errors)
