"""Consumers - document generation on top of the template engine."""

from shaderdocs.consumers.orchestrator import (
    DocumentRenderer,
    DocumentResult,
    Orchestrator,
    RunSummary,
    run_from_config,
)

__all__ = [
    "DocumentRenderer",
    "DocumentResult",
    "Orchestrator",
    "RunSummary",
    "run_from_config",
]
