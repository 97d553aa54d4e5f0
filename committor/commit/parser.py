"""Response Parser - Extract validated commit candidates from raw completion text."""

import logging
import re
from typing import Iterator

from committor.commit.candidate import HEADER_RE, CommitCandidate, MalformedCandidate
from committor.llm.base import RawCompletion

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# "1. ", "2) ", "- ", "* ", "• ", "[Option 1]"
LIST_PREFIX_RE = re.compile(r'^\s*(?:\[Option\s*\d+\]|\d+[.)]|[-*•+])\s+', re.IGNORECASE)
WRAPPERS = ('`', '"', "'", '*')


class NoValidCandidates(Exception):
    """Raised when a completion yields no valid commit message."""

    def __init__(self, raw_text: str, rejected: int = 0):
        self.raw_text = raw_text
        self.rejected = rejected
        preview = raw_text.strip().split('\n')[0][:60] if raw_text.strip() else "<empty>"
        super().__init__(
            f"No valid conventional commit messages in response "
            f"({rejected} rejected). Got: {preview}"
        )


def clean_line(line: str) -> str:
    """Strip list markers and wrapping quotes/backticks/bold from one line."""
    text = LIST_PREFIX_RE.sub('', line.strip(), count=1).strip()
    while len(text) >= 2 and text[0] in WRAPPERS and text[-1] == text[0]:
        text = text[1:-1].strip()
    return text


class ResponseParser:
    """Turns a RawCompletion into CommitCandidates, one per accepted line."""

    def parse(self, raw: RawCompletion) -> Iterator[CommitCandidate]:
        """Yield unique valid candidates in completion order.

        Lines that merely look like a header but fail validation are dropped.

        Raises:
            NoValidCandidates: once exhausted, if nothing was yielded.
        """
        if not raw.success:
            logger.warning("Completion from %s was cut short, parsing what arrived", raw.provider or "provider")

        seen: set[tuple[str, str, str]] = set()
        rejected = 0

        for line in raw.text.splitlines():
            if line.strip().startswith('```'):
                continue
            text = clean_line(line)
            match = HEADER_RE.match(text)
            if not match:
                continue

            try:
                candidate = CommitCandidate(
                    type=match.group('type'),
                    scope=match.group('scope'),
                    description=match.group('description'),
                    breaking=bool(match.group('breaking')),
                )
            except MalformedCandidate as e:
                rejected += 1
                logger.debug("Rejected candidate %r: %s", text, e)
                continue

            if candidate.key in seen:
                logger.debug("Dropped duplicate candidate %r", candidate.subject)
                continue
            seen.add(candidate.key)
            yield candidate

        if not seen:
            raise NoValidCandidates(raw.text, rejected=rejected)

    def parse_all(self, raw: RawCompletion) -> list[CommitCandidate]:
        return list(self.parse(raw))
