"""Shared fixtures: an in-memory repository and a scripted completion provider."""

import pytest

from committor.llm.base import LLMClient, RawCompletion


def make_diff(path: str, added: list[str] = (), removed: list[str] = (), new_file: bool = False) -> str:
    """Build a minimal unified diff for one path."""
    lines = [f"diff --git a/{path} b/{path}"]
    if new_file:
        lines += ["new file mode 100644", "index 0000000..e69de29", "--- /dev/null"]
    else:
        lines += ["index 83db48f..bf269f4 100644", f"--- a/{path}"]
    lines.append(f"+++ b/{path}")
    lines.append(f"@@ -1,{len(removed)} +1,{len(added)} @@")
    lines += [f"-{line}" for line in removed]
    lines += [f"+{line}" for line in added]
    return "\n".join(lines) + "\n"


class FakeRepo:
    """Implements the VCS calls the pipeline and CLI use, backed by a dict."""

    def __init__(self, files: dict[str, str] | None = None, branch: str = "main",
                 recent: list[str] | None = None):
        self.files = dict(files or {})
        self.branch = branch
        self.recent = list(recent or [])
        self.commits: list[str] = []
        self.diff_calls: list[str] = []

    def list_staged_files(self) -> list[str]:
        return list(self.files)

    def staged_diff_text(self, path: str) -> str:
        self.diff_calls.append(path)
        return self.files[path]

    def commit(self, message: str) -> str:
        self.commits.append(message)
        return "abc1234"

    def current_branch(self) -> str:
        return self.branch

    def recent_commit_subjects(self, limit: int = 5) -> list[str]:
        return self.recent[:limit]


class StubClient(LLMClient):
    """Replays scripted replies; an Exception in the script is raised instead.

    The last entry repeats once the script runs out.
    """

    provider = "stub"
    DEFAULT_MODEL = "stub-model"

    def __init__(self, *replies, model: str | None = None, available: bool = True,
                 models: set[str] | None = None):
        self.replies = list(replies) or [""]
        self.model = model or self.DEFAULT_MODEL
        self.timeout = 60
        self.available = available
        self.models = models if models is not None else {self.model}
        self.calls = 0
        self.requests = []

    def complete(self, request):
        self.calls += 1
        self.requests.append(request)
        reply = self.replies[min(self.calls, len(self.replies)) - 1]
        if isinstance(reply, Exception):
            raise reply
        return RawCompletion(text=reply, model=request.model, provider=self.provider)

    def list_models(self) -> set[str]:
        return set(self.models)

    def is_available(self) -> bool:
        return self.available


LIB_RS_DIFF = make_diff(
    "src/lib.rs",
    added=["pub fn new_feature() -> bool {", "    true", "}"],
)


@pytest.fixture
def lib_repo():
    """One modified Rust file with a hunk adding a function."""
    return FakeRepo({"src/lib.rs": LIB_RS_DIFF})


@pytest.fixture
def empty_repo():
    return FakeRepo()
