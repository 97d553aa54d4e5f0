"""Context Hints - Lightweight project context inferred from touched paths."""

import re
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from pathlib import PurePosixPath

from committor.git.diff_processor import SanitizedDiff

LANGUAGES_BY_EXTENSION = {
    '.py': 'Python', '.pyi': 'Python',
    '.rs': 'Rust',
    '.js': 'JavaScript/TypeScript', '.jsx': 'JavaScript/TypeScript',
    '.ts': 'JavaScript/TypeScript', '.tsx': 'JavaScript/TypeScript',
    '.java': 'Java', '.kt': 'Kotlin', '.scala': 'Scala',
    '.go': 'Go', '.rb': 'Ruby', '.php': 'PHP', '.cs': 'C#',
    '.c': 'C', '.h': 'C', '.cpp': 'C++', '.cc': 'C++', '.cxx': 'C++', '.hpp': 'C++',
    '.swift': 'Swift', '.dart': 'Dart', '.clj': 'Clojure', '.hs': 'Haskell',
    '.ex': 'Elixir', '.exs': 'Elixir', '.erl': 'Erlang', '.zig': 'Zig', '.nim': 'Nim',
}

# First match wins
PROJECT_MANIFESTS = [
    ('Cargo.toml', 'Rust Project'),
    ('package.json', 'Node.js Project'),
    ('pyproject.toml', 'Python Project'),
    ('setup.py', 'Python Project'),
    ('requirements.txt', 'Python Project'),
    ('pom.xml', 'Java Project'),
    ('build.gradle', 'Java Project'),
    ('go.mod', 'Go Project'),
    ('Gemfile', 'Ruby Project'),
    ('composer.json', 'PHP Project'),
    ('pubspec.yaml', 'Dart/Flutter Project'),
    ('Package.swift', 'Swift Project'),
]


class Category(IntEnum):
    """Path category used to suggest commit types."""
    SOURCE = 1
    TEST = 2
    CONFIG = 3
    DOCS = 4
    CI = 5


CI_PATTERNS: list[str] = [
    r'^\.github/', r'\.gitlab-ci', r'^\.circleci/', r'(^|/)ci/', r'Jenkinsfile$',
    r'azure-pipelines', r'\.travis\.yml$',
]

TEST_PATTERNS: list[str] = [
    r'(^|/)tests?/', r'(^|/)specs?/', r'__tests__/',
    r'\.test\.', r'\.spec\.', r'_test\.', r'_spec\.', r'(^|/)test_[^/]+$',
    r'Test\.java$', r'Tests\.java$',
]

CONFIG_PATTERNS: list[str] = [
    r'\.ya?ml$', r'\.toml$', r'\.ini$', r'\.cfg$',
    r'package\.json$', r'\.lock$', r'requirements[^/]*\.txt$', r'setup\.py$',
    r'Makefile$', r'Dockerfile$', r'docker-compose', r'pom\.xml$', r'build\.gradle$', r'go\.mod$',
]

DOCS_PATTERNS: list[str] = [
    r'\.md$', r'\.rst$', r'(^|/)docs?/', r'README', r'CHANGELOG', r'LICENSE',
]

_PATTERNS_BY_CATEGORY = [
    (Category.CI, [re.compile(p, re.IGNORECASE) for p in CI_PATTERNS]),
    (Category.TEST, [re.compile(p, re.IGNORECASE) for p in TEST_PATTERNS]),
    (Category.DOCS, [re.compile(p, re.IGNORECASE) for p in DOCS_PATTERNS]),
    (Category.CONFIG, [re.compile(p, re.IGNORECASE) for p in CONFIG_PATTERNS]),
]

# Suggested types per category, in suggestion order
TYPES_BY_CATEGORY = {
    Category.SOURCE: ['feat', 'fix', 'refactor'],
    Category.TEST: ['test'],
    Category.DOCS: ['docs'],
    Category.CONFIG: ['build', 'chore'],
    Category.CI: ['ci'],
}


def classify_path(path: str) -> Category:
    for category, patterns in _PATTERNS_BY_CATEGORY:
        if any(p.search(path) for p in patterns):
            return category
    return Category.SOURCE


def detect_language(paths: list[str]) -> str | None:
    """Most frequent language among touched files, or None if unknown."""
    counts = Counter(
        LANGUAGES_BY_EXTENSION[suffix]
        for suffix in (PurePosixPath(p).suffix.lower() for p in paths)
        if suffix in LANGUAGES_BY_EXTENSION
    )
    if not counts:
        return None
    # Ties resolve alphabetically so the prompt stays deterministic
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


def detect_project_type(paths: list[str]) -> str | None:
    names = {PurePosixPath(p).name for p in paths}
    for manifest, project_type in PROJECT_MANIFESTS:
        if manifest in names:
            return project_type
    return None


def suggest_commit_types(paths: list[str]) -> list[str]:
    categories = {classify_path(p) for p in paths}
    suggestions: list[str] = []
    for category in sorted(categories):
        for commit_type in TYPES_BY_CATEGORY.get(category, []):
            if commit_type not in suggestions:
                suggestions.append(commit_type)
    return suggestions


BRANCH_TYPE_PREFIXES = [
    (('feature/', 'feat/'), 'feat'),
    (('fix/', 'bugfix/', 'hotfix/'), 'fix'),
]


def prioritize_by_branch(suggestions: list[str], branch: str | None) -> list[str]:
    """Move the type implied by a feature/ or fix/ branch to the front."""
    for prefixes, commit_type in BRANCH_TYPE_PREFIXES:
        if branch and branch.startswith(prefixes):
            return [commit_type] + [t for t in suggestions if t != commit_type]
    return suggestions


@dataclass(frozen=True)
class ContextHints:
    """Optional context that shapes the prompt. Every field may be empty."""
    language: str | None = None
    project_type: str | None = None
    suggested_types: tuple[str, ...] = ()
    branch: str | None = None
    recent_commits: tuple[str, ...] = ()
    hint: str | None = None
    forced_type: str | None = None

    @classmethod
    def from_diff(
        cls,
        diff: SanitizedDiff,
        branch: str | None = None,
        recent_commits: tuple[str, ...] | list[str] = (),
        hint: str | None = None,
        forced_type: str | None = None,
    ) -> 'ContextHints':
        paths = diff.paths
        return cls(
            language=detect_language(paths),
            project_type=detect_project_type(paths),
            suggested_types=tuple(prioritize_by_branch(suggest_commit_types(paths), branch)),
            branch=branch,
            recent_commits=tuple(recent_commits),
            hint=hint,
            forced_type=forced_type,
        )

    @property
    def is_empty(self) -> bool:
        return not any([
            self.language, self.project_type, self.suggested_types,
            self.branch, self.recent_commits, self.hint,
        ])
