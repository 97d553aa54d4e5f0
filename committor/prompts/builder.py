"""Prompt Builder - Construct LLM prompts for commit message generation."""

from dataclasses import dataclass

from committor import COMMIT_TYPES
from committor.git.diff_processor import SanitizedDiff
from committor.prompts.context import ContextHints

DEFAULT_TIMEOUT = 60.0
DEFAULT_SUBJECT_LENGTH = 72

SYSTEM_PROMPT = """You are a senior software engineer who writes clear, concise conventional commit messages.

Your standards:
- Identify the PRIMARY purpose of a change from its diff
- Imperative mood ("add" not "added" or "adds")
- Specific verbs over vague ones (avoid "update", "change", "modify")
- Output only what was asked for, with no commentary"""

_EXAMPLES = """\
feat(auth): add JWT token validation
fix(database): resolve connection timeout
docs(readme): describe installation steps
refactor(utils): simplify error handling
test(api): cover user endpoint errors
chore(deps): bump requests to 2.32
perf(queries): add index for user lookups
ci(github): run tests on pull requests
build(docker): pin base image version"""


@dataclass(frozen=True)
class PromptRequest:
    """Everything a provider needs for one completion call."""
    model: str
    prompt: str
    count: int = 1
    timeout: float = DEFAULT_TIMEOUT
    system: str = SYSTEM_PROMPT
    endpoint: str | None = None

    @property
    def estimated_tokens(self) -> int:
        """Rough token estimate (~4 chars per token)."""
        return (len(self.system) + len(self.prompt)) // 4


class PromptBuilder:
    """Constructs prompts asking for N conventional commit headers, one per line.

    Output depends only on the inputs.
    """

    def __init__(
        self,
        model: str,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: str | None = None,
        max_subject_length: int = DEFAULT_SUBJECT_LENGTH,
    ):
        self.model = model
        self.timeout = timeout
        self.endpoint = endpoint
        self.max_subject_length = max_subject_length

    def build(self, diff: SanitizedDiff, count: int = 1, hints: ContextHints | None = None) -> PromptRequest:
        count = max(1, count)
        hints = hints or ContextHints()
        sections = [
            self._build_format_section(hints),
            self._build_examples_section(),
            self._build_context_section(hints),
            self._build_diff_section(diff),
            self._build_final_instructions(count),
        ]
        prompt = "\n\n".join(filter(None, sections))
        return PromptRequest(
            model=self.model,
            prompt=prompt,
            count=count,
            timeout=self.timeout,
            endpoint=self.endpoint,
        )

    def _build_format_section(self, hints: ContextHints) -> str:
        return f"""<format>
Every commit message is a single line in this exact grammar:

type(scope): description

- type is REQUIRED and must be one of the types listed below
- (scope) is optional: ONE word naming the module, feature or component (auth, api, cli)
- append ! after the type or scope only for breaking changes: feat(api)!: description
- description: lowercase, imperative mood, no period at the end
- keep the whole line under {self.max_subject_length} characters
{self._build_type_instruction(hints.forced_type)}
</format>"""

    def _build_type_instruction(self, forced_type: str | None) -> str:
        if forced_type:
            return f"\nIMPORTANT: Use type '{forced_type}' for every message."
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"\nAllowed types (no others):\n{types_list}"

    def _build_examples_section(self) -> str:
        warning = "These show FORMAT only. Never reuse words from them; describe the ACTUAL diff below."
        return f"""<format-examples>
{warning}

{_EXAMPLES}
</format-examples>"""

    def _build_context_section(self, hints: ContextHints) -> str:
        if hints.is_empty:
            return ""

        lines = ["<context>"]
        if hints.language:
            lines.append(f"Primary language: {hints.language}")
        if hints.project_type:
            lines.append(f"Project type: {hints.project_type}")
        if hints.branch:
            lines.append(f"Branch: {hints.branch}")
        if hints.suggested_types and not hints.forced_type:
            lines.append(f"Likely types based on the touched files: {', '.join(hints.suggested_types)}")
        if hints.recent_commits:
            lines.append("Recent commits (match their style):")
            lines.extend(f"  {subject}" for subject in hints.recent_commits)
        if hints.hint:
            lines.append(f'The developer describes the change as: "{hints.hint}"')
            lines.append("Use this to inform your messages, but verify it against the diff.")
        lines.append("</context>")
        return "\n".join(lines)

    def _build_diff_section(self, diff: SanitizedDiff) -> str:
        parts = ["<changes>", diff.text]
        if diff.truncated:
            parts.append(
                f"\n[Note: The diff was truncated due to size; the {diff.omitted_count} files marked 'omitted' "
                "are listed by path only. Do not assume the diff above is complete.]"
            )
        parts.append("</changes>")
        return "\n".join(parts)

    def _build_final_instructions(self, count: int) -> str:
        if count == 1:
            what = "exactly ONE commit message"
            variety = ""
        else:
            what = f"exactly {count} DISTINCT commit messages, one per line"
            variety = "\n- Each line must take a different angle (scope, type or wording)"

        return f"""<instructions>
Generate {what}.

Rules:
- Each line is a complete message: type(scope): description{variety}
- No numbering, no bullets, no quotes
- No markdown formatting (no ```, no bold)
- No preamble like "Here are some options:"
- No explanation before or after the messages
</instructions>"""
