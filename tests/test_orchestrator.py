"""Tests for the capability registry, delegation dispatcher and pipeline."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from lens_reviewer.agents.base import GeneralReviewer
from lens_reviewer.models.findings import GeneralFinding, GeneralSeverity
from lens_reviewer.models.review import FALLBACK_SOURCE
from lens_reviewer.models.sources import SourceFile

TARGET = "code-review:code-reviewer"


def _general_finding(description: str = "Delegated finding") -> GeneralFinding:
    return GeneralFinding(
        category="logic",
        severity=GeneralSeverity.HIGH,
        file_path="app/service.py",
        line=4,
        description=description,
        remediation="Fix the logic",
    )


class StubReviewer(GeneralReviewer):
    """General reviewer returning canned findings."""

    NAME = "stub"

    def __init__(self, findings=None, delay: float = 0, error: Exception | None = None):
        self.findings = findings or []
        self.delay = delay
        self.error = error
        self.calls: list[list[SourceFile]] = []

    async def review(self, files):
        self.calls.append(files)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.findings


class TestCapabilityRegistry:
    """Tests for CapabilityRegistry."""

    def test_register_and_resolve(self):
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        reviewer = StubReviewer()
        registry.register(TARGET, reviewer)

        assert registry.resolve(TARGET) is reviewer
        assert TARGET in registry
        assert len(registry) == 1
        assert registry.names() == [TARGET]

    def test_resolve_missing_returns_not_available(self):
        from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry

        result = CapabilityRegistry().resolve(TARGET)

        assert result is NOT_AVAILABLE
        assert repr(result) == "NOT_AVAILABLE"

    @pytest.mark.parametrize("name", ["code-reviewer", "Code:Reviewer", ":agent", "plugin:", "a:b:c"])
    def test_register_rejects_malformed_names(self, name):
        from lens_reviewer.models.capability import InvalidCapabilityName
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        with pytest.raises(InvalidCapabilityName):
            CapabilityRegistry().register(name, StubReviewer())

    def test_register_duplicate(self):
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register(TARGET, StubReviewer())

        with pytest.raises(ValueError, match="already registered"):
            registry.register(TARGET, StubReviewer())

        replacement = StubReviewer()
        registry.register(TARGET, replacement, replace=True)
        assert registry.resolve(TARGET) is replacement

    def test_unregister(self):
        from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register(TARGET, StubReviewer())
        registry.unregister(TARGET)
        registry.unregister("other:missing")

        assert registry.resolve(TARGET) is NOT_AVAILABLE

    def test_split_capability_name(self):
        from lens_reviewer.models.capability import split_capability_name

        assert split_capability_name(TARGET) == ("code-review", "code-reviewer")


class TestDelegationDispatcher:
    """Tests for DelegationDispatcher."""

    @pytest.mark.asyncio
    async def test_registered_delegate_findings_verbatim(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        delegated = [_general_finding("one"), _general_finding("two")]
        delegate = StubReviewer(findings=delegated)
        fallback = StubReviewer(findings=[_general_finding("local")])
        registry = CapabilityRegistry()
        registry.register(TARGET, delegate)

        dispatcher = DelegationDispatcher(registry, fallback=fallback)
        review = await dispatcher.dispatch(TARGET, [python_service])

        assert review.findings == delegated
        assert review.source == TARGET
        assert review.delegated
        assert delegate.calls == [[python_service]]
        assert fallback.calls == []

    @pytest.mark.asyncio
    async def test_unregistered_uses_fallback(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        local = [_general_finding("local")]
        fallback = StubReviewer(findings=local)

        dispatcher = DelegationDispatcher(CapabilityRegistry(), fallback=fallback)
        review = await dispatcher.dispatch(TARGET, [python_service])

        assert review.findings == local
        assert review.source == FALLBACK_SOURCE
        assert not review.delegated
        assert fallback.calls == [[python_service]]

    @pytest.mark.asyncio
    async def test_no_target_skips_delegation(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        delegate = StubReviewer(findings=[_general_finding()])
        registry = CapabilityRegistry()
        registry.register(TARGET, delegate)

        dispatcher = DelegationDispatcher(registry, fallback=StubReviewer())
        review = await dispatcher.dispatch(None, [python_service])

        assert review.source == FALLBACK_SOURCE
        assert delegate.calls == []

    @pytest.mark.asyncio
    async def test_delegate_timeout_falls_back(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register(TARGET, StubReviewer(findings=[_general_finding()], delay=1))
        fallback = StubReviewer(findings=[_general_finding("local")])

        dispatcher = DelegationDispatcher(registry, fallback=fallback, timeout_seconds=0.01)
        review = await dispatcher.dispatch(TARGET, [python_service])

        assert review.source == FALLBACK_SOURCE
        assert [f.description for f in review.findings] == ["local"]

    @pytest.mark.asyncio
    async def test_delegate_failure_falls_back(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register(TARGET, StubReviewer(error=RuntimeError("plugin crashed")))

        dispatcher = DelegationDispatcher(registry, fallback=StubReviewer())
        review = await dispatcher.dispatch(TARGET, [python_service])

        assert review.source == FALLBACK_SOURCE
        assert review.findings == []

    @pytest.mark.asyncio
    async def test_try_delegate_not_available(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry

        dispatcher = DelegationDispatcher(CapabilityRegistry())

        assert await dispatcher.try_delegate(TARGET, [python_service]) is NOT_AVAILABLE

    @pytest.mark.asyncio
    async def test_try_delegate_empty_findings_is_not_fallback(self, python_service):
        """A delegate answering with no findings still counts as delegated."""
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register(TARGET, StubReviewer(findings=[]))
        fallback = StubReviewer(findings=[_general_finding("local")])

        review = await DelegationDispatcher(registry, fallback=fallback).dispatch(
            TARGET, [python_service]
        )

        assert review.source == TARGET
        assert review.findings == []
        assert fallback.calls == []

    @pytest.mark.asyncio
    async def test_default_fallback_is_local_reviewer(self, python_service):
        from lens_reviewer.agents.general import LocalGeneralReviewer
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        dispatcher = DelegationDispatcher(CapabilityRegistry())
        assert isinstance(dispatcher.fallback, LocalGeneralReviewer)

        review = await dispatcher.dispatch(TARGET, [python_service])
        assert [f.category for f in review.findings] == ["test-coverage"]

    @pytest.mark.asyncio
    async def test_mock_delegate(self, python_service):
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        delegate = MagicMock(spec=GeneralReviewer)
        delegate.name = "mock"
        delegate.review = AsyncMock(return_value=[_general_finding()])
        registry = CapabilityRegistry()
        registry.register(TARGET, delegate)

        findings = await DelegationDispatcher(registry).try_delegate(TARGET, [python_service])

        delegate.review.assert_awaited_once_with([python_service])
        assert findings == [_general_finding()]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [None, 42, ["not a finding"]])
    async def test_malformed_delegate_answer_falls_back(self, python_service, answer):
        """A delegate answering with something other than findings is unavailable."""
        from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
        from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry

        delegate = MagicMock(spec=GeneralReviewer)
        delegate.name = "mock"
        delegate.review = AsyncMock(return_value=answer)
        registry = CapabilityRegistry()
        registry.register(TARGET, delegate)
        fallback = StubReviewer(findings=[_general_finding("local")])
        dispatcher = DelegationDispatcher(registry, fallback=fallback)

        assert await dispatcher.try_delegate(TARGET, [python_service]) is NOT_AVAILABLE

        review = await dispatcher.dispatch(TARGET, [python_service])

        assert review.source == FALLBACK_SOURCE
        assert review.findings == [_general_finding("local")]


class TestReviewPipeline:
    """Tests for ReviewPipeline."""

    @pytest.mark.asyncio
    async def test_delegated_run(self, python_definition, python_service):
        from lens_reviewer.orchestrator.pipeline import ReviewPipeline
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        delegated = [_general_finding()]
        registry = CapabilityRegistry()
        registry.register(python_definition.delegate, StubReviewer(findings=delegated))

        report = await ReviewPipeline(python_definition, registry=registry).run([python_service])

        assert report.title == "python-reviewer report"
        assert report.general_findings == delegated
        assert report.general_source == python_definition.delegate
        assert [f.line for f in report.domain_findings] == [6, 15, 7, 8]
        assert report.passed_checks == ["style", "performance"]
        assert report.files_reviewed == ["app/service.py"]

    @pytest.mark.asyncio
    async def test_fallback_run_without_registration(self, python_definition, python_service):
        from lens_reviewer.orchestrator.pipeline import ReviewPipeline

        report = await ReviewPipeline(python_definition).run([python_service])

        assert report.general_source == FALLBACK_SOURCE
        assert [f.category for f in report.general_findings] == ["test-coverage"]
        assert len(report.domain_findings) == 4

    @pytest.mark.asyncio
    async def test_delegation_disabled(self, python_definition, python_service):
        from lens_reviewer.orchestrator.pipeline import PipelineConfig, ReviewPipeline
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        delegate = StubReviewer(findings=[_general_finding()])
        registry = CapabilityRegistry()
        registry.register(TARGET, delegate)

        pipeline = ReviewPipeline(
            python_definition,
            registry=registry,
            config=PipelineConfig(delegation_enabled=False),
        )
        report = await pipeline.run([python_service])

        assert pipeline.delegate_target is None
        assert report.general_source == FALLBACK_SOURCE
        assert delegate.calls == []

    @pytest.mark.asyncio
    async def test_target_override(self, python_definition, python_service):
        from lens_reviewer.orchestrator.pipeline import PipelineConfig, ReviewPipeline
        from lens_reviewer.orchestrator.registry import CapabilityRegistry

        registry = CapabilityRegistry()
        registry.register("team-review:strict", StubReviewer(findings=[_general_finding()]))

        pipeline = ReviewPipeline(
            python_definition,
            registry=registry,
            config=PipelineConfig(target_override="team-review:strict"),
        )
        report = await pipeline.run([python_service])

        assert report.general_source == "team-review:strict"

    @pytest.mark.asyncio
    async def test_definition_without_delegate(self, python_service):
        from lens_reviewer.agents.definitions import AgentDefinition
        from lens_reviewer.orchestrator.pipeline import ReviewPipeline

        definition = AgentDefinition(
            name="solo",
            description="",
            domain="python",
            lenses=("style",),
            delegate=None,
        )
        pipeline = ReviewPipeline(definition, fallback=StubReviewer())

        report = await pipeline.run([python_service])

        assert pipeline.delegate_target is None
        assert report.general_source == FALLBACK_SOURCE
        assert report.passed_checks == ["style"]
