"""Pipeline stages.

- Stage 1: Repeated-phrase mining, shortest length first
- Stage 2: Subsumption filtering, longest length first
- Stage 3: Pruning of phrases left with a single independent occurrence
- Stage 4: Anchor links along the trail
- Stage 5: Previous/next chapter navigation
"""

from trail_pipeline.stages.orchestrator import (
    LengthStats,
    PipelineConfig,
    PipelineResult,
    run_pipeline,
)

__all__ = [
    "LengthStats",
    "PipelineConfig",
    "PipelineResult",
    "run_pipeline",
]
