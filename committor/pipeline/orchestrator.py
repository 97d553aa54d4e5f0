"""Generation Orchestrator - Drive one staged snapshot through to commit candidates."""

import logging
import time
from dataclasses import dataclass, field

from committor.commit.candidate import CommitCandidate
from committor.commit.parser import NoValidCandidates, ResponseParser
from committor.git.diff_processor import DEFAULT_MAX_BYTES, DiffProcessor, StagedSource
from committor.llm.base import LLMClient, LLMError, RawCompletion
from committor.pipeline.state import DEFAULT_RETRIES, RetryPolicy, Stage, next_stage
from committor.prompts.builder import DEFAULT_SUBJECT_LENGTH, DEFAULT_TIMEOUT, PromptBuilder
from committor.prompts.context import ContextHints

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass
class GenerationResult:
    """Outcome of one run: candidates in provider order plus diagnostics.

    A FAILED result still carries whatever was obtained before the failure.
    """
    candidates: list[CommitCandidate] = field(default_factory=list)
    provider: str = ""
    model: str = ""
    requested: int = 0
    truncated: bool = False
    redactions: int = 0
    status: Stage = Stage.COLLECTING
    error: Exception | None = None
    attempts: int = 0
    raw_completions: list[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == Stage.SATISFIED

    @property
    def redacted(self) -> bool:
        return self.redactions > 0

    @property
    def best(self) -> CommitCandidate | None:
        return self.candidates[0] if self.candidates else None

    @property
    def messages(self) -> list[str]:
        return [c.render() for c in self.candidates]

    def select(self, index: int = 0) -> CommitCandidate:
        if not 0 <= index < len(self.candidates):
            raise IndexError(f"No candidate {index + 1}; {len(self.candidates)} available")
        return self.candidates[index]


class CommitGenerator:
    """Runs collect -> prompt -> complete -> parse for one invocation.

    Never stages or commits anything; the caller does that with the chosen
    candidate.
    """

    def __init__(
        self,
        repo: StagedSource,
        client: LLMClient,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        max_subject_length: int = DEFAULT_SUBJECT_LENGTH,
        builder: PromptBuilder | None = None,
        processor: DiffProcessor | None = None,
        parser: ResponseParser | None = None,
    ):
        self.client = client
        self.max_bytes = max_bytes
        self.policy = RetryPolicy(max_retries=retries)
        self.processor = processor or DiffProcessor(repo)
        self.builder = builder or PromptBuilder(
            model=client.model,
            timeout=timeout,
            endpoint=client.endpoint,
            max_subject_length=max_subject_length,
        )
        self.parser = parser or ResponseParser()

    def run(
        self,
        count: int = 3,
        hints: ContextHints | None = None,
        *,
        branch: str | None = None,
        recent_commits: tuple[str, ...] | list[str] = (),
        hint: str | None = None,
        forced_type: str | None = None,
    ) -> GenerationResult:
        """Generate up to count candidates.

        Raises:
            NoStagedChanges: before any provider call, if nothing is staged.
        """
        started = time.monotonic()
        stage = Stage.COLLECTING
        diff = self.processor.collect(self.max_bytes)

        stage = self._advance(stage, 0)
        if hints is None:
            hints = ContextHints.from_diff(
                diff, branch=branch, recent_commits=recent_commits,
                hint=hint, forced_type=forced_type,
            )
        request = self.builder.build(diff, count, hints)
        logger.debug("Prompt: ~%d tokens for %d files", request.estimated_tokens, diff.total_files)

        result = GenerationResult(
            provider=self.client.provider,
            model=request.model,
            requested=request.count,
            truncated=diff.truncated,
            redactions=diff.redactions,
        )

        stage = self._advance(stage, 0)
        raw: RawCompletion | None = None
        attempt = 0

        while not stage.is_terminal:
            error: Exception | None = None

            if stage == Stage.AWAITING_COMPLETION:
                attempt += 1
                logger.info("Requesting %d candidates from %s (attempt %d/%d)",
                            request.count, self.client.name, attempt, self.policy.max_attempts)
                try:
                    raw = self.client.complete(request)
                    result.raw_completions.append(raw.text)
                except LLMError as e:
                    error = e
            elif stage == Stage.PARSING:
                try:
                    result.candidates = self.parser.parse_all(raw)
                except NoValidCandidates as e:
                    error = e

            stage = self._advance(stage, attempt, error)
            if stage == Stage.RETRYING:
                logger.warning("Attempt %d failed (%s), retrying", attempt, error)
            elif stage == Stage.FAILED:
                logger.warning("Generation failed after %d attempt(s): %s", attempt, error)
                result.error = error

        result.status = stage
        result.attempts = attempt
        result.elapsed = time.monotonic() - started

        if result.ok:
            if len(result.candidates) < result.requested:
                logger.warning("Asked for %d candidates, got %d", result.requested, len(result.candidates))
            logger.info("Generated %d candidates in %.2fs", len(result.candidates), result.elapsed)
        return result

    def _advance(self, stage: Stage, attempt: int, error: Exception | None = None) -> Stage:
        following = next_stage(stage, self.policy, attempt, error)
        logger.info("%s -> %s", stage.value, following.value)
        return following
