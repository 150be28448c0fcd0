"""Build pipeline."""

from .orchestrator import (
    BuildOrchestrator,
    PipelineStage,
    build_query_feeds,
    enrich_feeds,
    merge_feeds,
    populate_feeds,
)

__all__ = [
    "BuildOrchestrator",
    "PipelineStage",
    "build_query_feeds",
    "enrich_feeds",
    "merge_feeds",
    "populate_feeds",
]
