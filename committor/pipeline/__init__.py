"""Generation Pipeline Package"""

from committor.pipeline.orchestrator import CommitGenerator, GenerationResult
from committor.pipeline.state import RetryPolicy, Stage, next_stage

__all__ = [
    "CommitGenerator",
    "GenerationResult",
    "RetryPolicy",
    "Stage",
    "next_stage",
]
