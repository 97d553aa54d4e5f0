"""Git Analyzer - Read staged changes from git and create commits."""

import logging
import subprocess

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Thin wrapper over the git CLI.

    The pipeline only uses list_staged_files(), staged_diff_text() and
    commit(). The remaining helpers feed prompt context hints.
    """

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.cwd,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def list_staged_files(self) -> list[str]:
        """Paths staged for the next commit, in git's order."""
        output = self._run_git('diff', '--staged', '--name-only', '-z')
        return [path for path in output.split('\0') if path]

    def staged_diff_text(self, path: str) -> str:
        """Unified diff of one staged path.

        Binary files come back as git's "Binary files ... differ" marker.
        """
        return self._run_git('diff', '--staged', '--find-renames', '--', path)

    def commit(self, message: str) -> str:
        """Create a commit with message and return the short hash."""
        self._run_git('commit', '-m', message)
        short_hash = self._run_git('rev-parse', '--short', 'HEAD').strip()
        logger.info("Created commit %s", short_hash)
        return short_hash

    def current_branch(self) -> str:
        try:
            branch = self._run_git('branch', '--show-current').strip()
        except GitError:
            return 'HEAD'
        return branch or 'HEAD'  # detached HEAD prints nothing

    def recent_commit_subjects(self, limit: int = 5) -> list[str]:
        """Subjects of the last few commits, newest first. Empty on a fresh repo."""
        try:
            output = self._run_git('log', f'-{limit}', '--pretty=format:%s')
        except GitError:
            return []
        return [line for line in output.split('\n') if line.strip()]
