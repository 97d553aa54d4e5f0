"""Commit Message Parsing Package"""

from committor.commit.candidate import (
    MAX_DESCRIPTION_LENGTH,
    RECOMMENDED_SUBJECT_LENGTH,
    CommitCandidate,
    MalformedCandidate,
    parse_commit_line,
)
from committor.commit.parser import NoValidCandidates, ResponseParser, clean_line

__all__ = [
    "MAX_DESCRIPTION_LENGTH",
    "RECOMMENDED_SUBJECT_LENGTH",
    "CommitCandidate",
    "MalformedCandidate",
    "parse_commit_line",
    "NoValidCandidates",
    "ResponseParser",
    "clean_line",
]
