"""Orchestrator components for Lens Reviewer."""

from lens_reviewer.orchestrator.combiner import ReportCombiner
from lens_reviewer.orchestrator.dispatcher import DelegationDispatcher
from lens_reviewer.orchestrator.pipeline import PipelineConfig, ReviewPipeline
from lens_reviewer.orchestrator.registry import NOT_AVAILABLE, CapabilityRegistry, NotAvailable

__all__ = [
    "CapabilityRegistry",
    "DelegationDispatcher",
    "NOT_AVAILABLE",
    "NotAvailable",
    "PipelineConfig",
    "ReportCombiner",
    "ReviewPipeline",
]
