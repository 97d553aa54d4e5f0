"""Git Operations Package"""

from committor.git.analyzer import GitAnalyzer, GitError
from committor.git.diff_processor import (
    ChangeKind,
    ChangeSet,
    DiffProcessor,
    FileChange,
    NoStagedChanges,
    SanitizedDiff,
)
from committor.git.redaction import PLACEHOLDER, Redactor

__all__ = [
    "GitAnalyzer",
    "GitError",
    "ChangeKind",
    "ChangeSet",
    "DiffProcessor",
    "FileChange",
    "NoStagedChanges",
    "SanitizedDiff",
    "PLACEHOLDER",
    "Redactor",
]
