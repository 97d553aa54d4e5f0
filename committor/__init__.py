"""
Committor

Conventional commit messages generated from staged git changes.
"""

__version__ = "0.1.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py, commit/candidate.py (validation), cli/args.py (argparse)
COMMIT_TYPES = {
    'feat': 'A new feature',
    'fix': 'A bug fix',
    'docs': 'Documentation only changes',
    'style': 'Changes that do not affect the meaning of the code (formatting, whitespace)',
    'refactor': 'A code change that neither fixes a bug nor adds a feature',
    'test': 'Adding missing tests or correcting existing tests',
    'chore': 'Changes to the build process or auxiliary tools',
    'perf': 'A code change that improves performance',
    'ci': 'Changes to CI configuration files and scripts',
    'build': 'Changes that affect the build system or external dependencies',
}

# List of type names for validation and argparse
COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

# Note on breaking changes: "feat!:" or "feat(api)!:" marks a breaking change
