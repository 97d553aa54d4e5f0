"""CLI Utility Functions"""

from committor.commit import CommitCandidate
from committor.output import bold, dim, info, colorize_commit_type
from committor.pipeline import GenerationResult


def _format_option(candidate: CommitCandidate, option_num: int) -> str:
    """Format a single option with colored type and clear visual hierarchy."""
    lines = colorize_commit_type(candidate.render()).split('\n')

    parts = [f"{info(f'[{option_num}]')} {bold(lines[0])}"]

    body_lines = [line for line in lines[1:] if line.strip()]
    if body_lines:
        parts.append("")
        for line in body_lines:
            parts.append(f"    {dim(line)}")

    return '\n'.join(parts)


def display_candidates(candidates: list[CommitCandidate]) -> None:
    """Print every candidate, numbered."""
    print()
    for i, candidate in enumerate(candidates, 1):
        print(_format_option(candidate, i))
        if i < len(candidates):
            print()
            print(dim("    · · ·"))
            print()
    print()


def display_options(candidates: list[CommitCandidate]) -> int | None:
    """Show candidates and get selection. Returns the chosen index, or None on quit."""
    display_candidates(candidates)
    while True:
        try:
            choice = input(f"Select [1-{len(candidates)}] or (q)uit: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            return None
        if choice == 'q':
            return None
        try:
            idx = int(choice) - 1
        except ValueError:
            idx = -1
        if 0 <= idx < len(candidates):
            return idx
        print(f"Enter 1-{len(candidates)} or q")


def display_message(candidate: CommitCandidate) -> None:
    """Display commit message with horizontal rules and colored type."""
    message = candidate.render()
    lines = colorize_commit_type(message).split('\n')
    # Width from the raw text; the colored one carries ANSI codes
    width = max((len(line) for line in message.split('\n')), default=40)
    print(f"\n{dim('─' * width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim('─' * width))


def format_stats(result: GenerationResult) -> str:
    """One-line diagnostics for --verbose."""
    return dim(
        f"  {result.provider}/{result.model}: {len(result.candidates)}/{result.requested} candidates, "
        f"{result.attempts} attempt(s), {result.elapsed:.2f}s"
    )
