"""Commit Candidate - A validated conventional commit message."""

import re
from dataclasses import dataclass, replace

from committor import COMMIT_TYPE_NAMES

# Recommended subject length; the prompt asks for it, validation doesn't enforce it
RECOMMENDED_SUBJECT_LENGTH = 72
MAX_DESCRIPTION_LENGTH = 100

HEADER_RE = re.compile(
    r'^(?P<type>[A-Za-z]+)'
    r'(?:\((?P<scope>[^()]*)\))?'
    r'(?P<breaking>!)?'
    r':[ \t]*(?P<description>.*)$'
)


class MalformedCandidate(ValueError):
    """Raised when a single candidate fails validation."""
    pass


def _normalize_description(description: str) -> str:
    description = ' '.join(description.split())
    if description.endswith('.') and not description.endswith('..'):
        description = description[:-1].rstrip()
    return description


@dataclass(frozen=True)
class CommitCandidate:
    """One proposed commit message.

    Construction normalizes and validates, so every instance renders to a
    header that parses back into an equal candidate.
    """
    type: str
    description: str
    scope: str | None = None
    body: str | None = None
    breaking: bool = False

    def __post_init__(self):
        commit_type = (self.type or '').strip().lower()
        if commit_type not in COMMIT_TYPE_NAMES:
            raise MalformedCandidate(f"Unknown commit type: {self.type!r}")

        if '\n' in (self.description or '').strip():
            raise MalformedCandidate("Description must be a single line")
        description = _normalize_description(self.description or '')
        if not description:
            raise MalformedCandidate("Empty description")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise MalformedCandidate(
                f"Description is {len(description)} chars, limit is {MAX_DESCRIPTION_LENGTH}"
            )

        scope = (self.scope or '').strip() or None
        if scope and any(c in scope for c in '()\n'):
            raise MalformedCandidate(f"Invalid scope: {scope!r}")
        body = (self.body or '').strip() or None

        object.__setattr__(self, 'type', commit_type)
        object.__setattr__(self, 'description', description)
        object.__setattr__(self, 'scope', scope)
        object.__setattr__(self, 'body', body)

    @property
    def subject(self) -> str:
        scope = f"({self.scope})" if self.scope else ""
        bang = "!" if self.breaking else ""
        return f"{self.type}{scope}{bang}: {self.description}"

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used for de-duplication."""
        return (self.type, (self.scope or '').lower(), self.description.lower())

    def render(self) -> str:
        if self.body:
            return f"{self.subject}\n\n{self.body}"
        return self.subject

    def with_body(self, body: str) -> 'CommitCandidate':
        return replace(self, body=body)

    def __str__(self) -> str:
        return self.render()


def parse_commit_line(line: str) -> CommitCandidate:
    """Parse a single 'type(scope): description' header.

    Raises:
        MalformedCandidate: if the line is not a valid conventional header.
    """
    match = HEADER_RE.match(line.strip())
    if not match:
        raise MalformedCandidate(f"Not a conventional commit header: {line[:50]!r}")
    return CommitCandidate(
        type=match.group('type'),
        scope=match.group('scope'),
        description=match.group('description'),
        breaking=bool(match.group('breaking')),
    )
