"""Tests for agent definitions."""

from pathlib import Path

import pytest

from lens_reviewer.agents.definitions import (
    BUILTIN_DEFINITIONS,
    DEFAULT_DELEGATE,
    AgentDefinition,
    DefinitionError,
    UnknownAgentError,
    all_definitions,
    get_definition,
    load_definition,
    load_definitions,
    parse_definition,
)

REPO_AGENTS = Path(__file__).parent.parent / "agents"

GAMEPLAY_DEFINITION = """\
---
name: gameplay-reviewer
description: Use after editing gameplay scripts
domain: unity
lenses: [lifecycle, performance]
delegate: team-review:gameplay
---
Focus on per-frame cost.
"""


class TestAgentDefinition:
    """Tests for AgentDefinition validation."""

    def test_builtins(self):
        assert set(BUILTIN_DEFINITIONS) == {
            "unity-reviewer",
            "python-reviewer",
            "typescript-reviewer",
        }
        for definition in BUILTIN_DEFINITIONS.values():
            assert definition.delegate == DEFAULT_DELEGATE

    def test_builtin_uses_full_lens_table(self):
        assert get_definition("python-reviewer").lenses == (
            "type-safety",
            "style",
            "error-handling",
            "async-correctness",
            "performance",
        )

    def test_unknown_domain(self):
        with pytest.raises(DefinitionError, match="unknown domain"):
            AgentDefinition(name="x", description="", domain="go", lenses=("style",))

    def test_unknown_lens(self):
        with pytest.raises(DefinitionError, match="unknown lenses"):
            AgentDefinition(name="x", description="", domain="python", lenses=("security",))

    def test_empty_lenses(self):
        with pytest.raises(DefinitionError, match="at least one lens"):
            AgentDefinition(name="x", description="", domain="python", lenses=())

    def test_malformed_delegate(self):
        with pytest.raises(DefinitionError, match="plugin-name:agent-name"):
            AgentDefinition(
                name="x",
                description="",
                domain="python",
                lenses=("style",),
                delegate="code-reviewer",
            )


class TestParseDefinition:
    """Tests for parse_definition."""

    def test_parse(self):
        definition = parse_definition(GAMEPLAY_DEFINITION, source_path="agents/gameplay.md")

        assert definition.name == "gameplay-reviewer"
        assert definition.domain == "unity"
        assert definition.lenses == ("lifecycle", "performance")
        assert definition.delegate == "team-review:gameplay"
        assert definition.instructions == "Focus on per-frame cost."
        assert definition.source_path == "agents/gameplay.md"

    def test_comma_separated_lenses(self):
        text = "---\nname: a\ndomain: python\nlenses: style, performance\n---\n"
        assert parse_definition(text).lenses == ("style", "performance")

    def test_omitted_lenses_use_domain_table(self):
        text = "---\nname: a\ndomain: typescript\n---\n"
        definition = parse_definition(text)

        assert definition.lenses[0] == "type-safety"
        assert len(definition.lenses) == 5
        assert definition.delegate == DEFAULT_DELEGATE

    def test_null_delegate_disables_delegation(self):
        text = "---\nname: a\ndomain: python\ndelegate: null\n---\n"
        assert parse_definition(text).delegate is None

    def test_missing_frontmatter(self):
        with pytest.raises(DefinitionError, match="missing YAML frontmatter"):
            parse_definition("# Just markdown\n")

    def test_missing_required_key(self):
        with pytest.raises(DefinitionError, match="domain"):
            parse_definition("---\nname: a\n---\n")

    def test_invalid_yaml(self):
        with pytest.raises(DefinitionError, match="invalid frontmatter"):
            parse_definition("---\nname: [unclosed\n---\n")

    def test_frontmatter_not_mapping(self):
        with pytest.raises(DefinitionError, match="mapping"):
            parse_definition("---\n- a\n- b\n---\n")


class TestLoadDefinitions:
    """Tests for loading definitions from disk."""

    def test_load_directory(self, tmp_path):
        (tmp_path / "gameplay.md").write_text(GAMEPLAY_DEFINITION)
        (tmp_path / "notes.txt").write_text("ignored")

        definitions = load_definitions(tmp_path)

        assert list(definitions) == ["gameplay-reviewer"]
        assert definitions["gameplay-reviewer"].source_path == str(tmp_path / "gameplay.md")

    def test_missing_directory(self, tmp_path):
        assert load_definitions(tmp_path / "missing") == {}

    def test_invalid_file_raises(self, tmp_path):
        (tmp_path / "bad.md").write_text("no frontmatter")
        with pytest.raises(DefinitionError):
            load_definitions(tmp_path)

    def test_loaded_overrides_builtin(self, tmp_path):
        (tmp_path / "python.md").write_text(
            "---\nname: python-reviewer\ndomain: python\nlenses: [style]\n---\n"
        )

        definitions = all_definitions(load_definitions(tmp_path))

        assert definitions["python-reviewer"].lenses == ("style",)
        assert "unity-reviewer" in definitions

    def test_example_definition_loads(self):
        definition = load_definition(REPO_AGENTS / "unity-gameplay-reviewer.md")

        assert definition.name == "unity-gameplay-reviewer"
        assert definition.lenses == ("lifecycle", "performance", "memory")

    def test_get_definition_unknown(self):
        with pytest.raises(UnknownAgentError, match="available"):
            get_definition("rust-reviewer")
