"""Generation state machine.

Each run moves through::

    COLLECTING -> PROMPTING -> AWAITING_COMPLETION -> PARSING
                                      ^                  |
                                      +--- RETRYING <----+--> SATISFIED | FAILED

Transitions are pure functions of (stage, outcome, attempt) so the retry
bound and terminal conditions can be tested without any I/O.
"""

from dataclasses import dataclass
from enum import Enum

from committor.commit.parser import NoValidCandidates
from committor.llm.base import ProviderTimeout

DEFAULT_RETRIES = 1


class Stage(str, Enum):
    COLLECTING = "collecting"
    PROMPTING = "prompting"
    AWAITING_COMPLETION = "awaiting_completion"
    PARSING = "parsing"
    RETRYING = "retrying"
    SATISFIED = "satisfied"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.SATISFIED, Stage.FAILED)


@dataclass(frozen=True)
class RetryPolicy:
    """How many extra attempts a run gets, and for which errors."""
    max_retries: int = DEFAULT_RETRIES
    retryable: tuple[type[Exception], ...] = (ProviderTimeout, NoValidCandidates)

    @property
    def max_attempts(self) -> int:
        return 1 + max(0, self.max_retries)

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """attempt is 1-based: the number of provider calls made so far."""
        return isinstance(error, self.retryable) and attempt < self.max_attempts


def next_stage(stage: Stage, policy: RetryPolicy, attempt: int = 0,
               error: Exception | None = None) -> Stage:
    """Stage that follows stage, given the outcome of the step just taken.

    error is the exception the step raised, or None when it succeeded.
    """
    if stage.is_terminal:
        return stage
    if stage == Stage.RETRYING:
        return Stage.AWAITING_COMPLETION
    if error is not None:
        if stage in (Stage.AWAITING_COMPLETION, Stage.PARSING) and policy.should_retry(error, attempt):
            return Stage.RETRYING
        return Stage.FAILED
    if stage == Stage.COLLECTING:
        return Stage.PROMPTING
    if stage == Stage.PROMPTING:
        return Stage.AWAITING_COMPLETION
    if stage == Stage.AWAITING_COMPLETION:
        return Stage.PARSING
    return Stage.SATISFIED
