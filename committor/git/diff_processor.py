"""Diff Processor - Collect staged changes into a redacted, size-bounded diff."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from committor.git.redaction import Redactor

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

DEFAULT_MAX_BYTES = 12000


class NoStagedChanges(Exception):
    """Raised when there is nothing staged to describe."""
    pass


class StagedSource(Protocol):
    """The only VCS calls the collector makes."""

    def list_staged_files(self) -> list[str]: ...

    def staged_diff_text(self, path: str) -> str: ...


class ChangeKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    BINARY = "binary"


@dataclass(frozen=True)
class FileChange:
    """One staged file. Binary files never carry hunk text."""
    path: str
    kind: ChangeKind = ChangeKind.MODIFIED
    hunk: str = ""
    additions: int = 0
    deletions: int = 0

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions

    @property
    def size(self) -> int:
        return len(self.hunk.encode('utf-8'))

    @classmethod
    def from_diff(cls, path: str, diff_text: str) -> 'FileChange':
        """Derive kind and line counts from the unified diff of one path."""
        kind = ChangeKind.MODIFIED
        additions = deletions = 0
        in_hunk = False

        for line in diff_text.split('\n'):
            if line.startswith('@@'):
                in_hunk = True
                continue
            if not in_hunk:
                if line.startswith('Binary files ') or line.startswith('GIT binary patch'):
                    return cls(path=path, kind=ChangeKind.BINARY)
                if line.startswith('new file mode'):
                    kind = ChangeKind.ADDED
                elif line.startswith('deleted file mode'):
                    kind = ChangeKind.DELETED
                elif line.startswith('rename from') and kind == ChangeKind.MODIFIED:
                    kind = ChangeKind.RENAMED
                continue
            if line.startswith('diff --git'):
                in_hunk = False
            elif line.startswith('+'):
                additions += 1
            elif line.startswith('-'):
                deletions += 1

        return cls(path=path, kind=kind, hunk=diff_text.rstrip('\n'),
                   additions=additions, deletions=deletions)


@dataclass(frozen=True)
class ChangeSet:
    """Staged files that fit the byte budget, in staging order."""
    files: tuple[FileChange, ...] = ()
    omitted: tuple[str, ...] = ()
    truncated: bool = False

    @property
    def size(self) -> int:
        return sum(f.size for f in self.files)

    @classmethod
    def build(cls, changes: list[FileChange], max_bytes: int) -> 'ChangeSet':
        included: list[FileChange] = []
        used = 0
        for index, change in enumerate(changes):
            if used + change.size > max_bytes:
                omitted = tuple(c.path for c in changes[index:])
                return cls(files=tuple(included), omitted=omitted, truncated=True)
            included.append(change)
            used += change.size
        return cls(files=tuple(included))


@dataclass(frozen=True)
class SanitizedDiff:
    """LLM-ready representation of staged changes."""
    changes: ChangeSet = field(default_factory=ChangeSet)
    redactions: int = 0

    @property
    def files(self) -> tuple[FileChange, ...]:
        return self.changes.files

    @property
    def truncated(self) -> bool:
        return self.changes.truncated

    @property
    def redacted(self) -> bool:
        return self.redactions > 0

    @property
    def omitted_count(self) -> int:
        return len(self.changes.omitted)

    @property
    def total_files(self) -> int:
        return len(self.changes.files) + len(self.changes.omitted)

    @property
    def paths(self) -> list[str]:
        """Every staged path, including the ones whose diffs were omitted."""
        return [f.path for f in self.changes.files] + list(self.changes.omitted)

    @property
    def summary(self) -> str:
        lines = [f"FILES CHANGED: {self.total_files}"]
        for f in self.files:
            if f.kind == ChangeKind.BINARY:
                lines.append(f"  {f.kind.value} {f.path}")
            else:
                lines.append(f"  {f.kind.value} {f.path} (+{f.additions} -{f.deletions})")
        if self.truncated:
            lines.extend(f"  omitted {path}" for path in self.changes.omitted)
            lines.append(omission_line(self.omitted_count))
        return "\n".join(lines)

    @property
    def text(self) -> str:
        parts = [self.summary]
        hunks = [f.hunk for f in self.files if f.hunk]
        if hunks:
            parts.extend(["", "DIFF:", "\n".join(hunks)])
        return "\n".join(parts)


def omission_line(count: int) -> str:
    noun = "file" if count == 1 else "files"
    return f"{count} additional {noun} changed, diffs omitted"


class DiffProcessor:
    """Reads staged changes, redacts them and applies the byte budget."""

    def __init__(self, source: StagedSource, redactor: Redactor | None = None):
        self.source = source
        self.redactor = redactor or Redactor()

    def collect(self, max_bytes: int = DEFAULT_MAX_BYTES) -> SanitizedDiff:
        """Main entry point: staged snapshot -> SanitizedDiff.

        Raises:
            NoStagedChanges: if nothing is staged.
        """
        paths = self.source.list_staged_files()
        if not paths:
            raise NoStagedChanges("No staged changes. Run 'git add' first.")

        changes = []
        redactions = 0
        for path in paths:
            result = self.redactor.redact(self.source.staged_diff_text(path))
            redactions += result.count
            changes.append(FileChange.from_diff(path, result.text))

        change_set = ChangeSet.build(changes, max_bytes)
        if change_set.truncated:
            logger.warning("Diff exceeds %d bytes, omitted %d of %d files",
                           max_bytes, len(change_set.omitted), len(paths))
        if redactions:
            logger.debug("Redacted %d credential-like values", redactions)

        return SanitizedDiff(changes=change_set, redactions=redactions)
