"""CLI Main Entry Point"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from committor.config import Config, load_config
from committor.commit import CommitCandidate
from committor.git import GitAnalyzer, GitError, NoStagedChanges
from committor.llm import LLMClient, LLMError, OllamaClient, ProviderUnavailable, get_client
from committor.output import bold, dim, info, warning, print_error, print_success, print_warning, Spinner
from committor.pipeline import CommitGenerator, GenerationResult

from committor.cli.args import parse_args
from committor.cli.commands import display_config, run_check, run_diff, run_models, run_warmup
from committor.cli.utils import display_candidates, display_message, display_options, format_stats

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

API_KEY_ENV = {
    'claude': 'ANTHROPIC_API_KEY',
    'openai': 'OPENAI_API_KEY',
}


@dataclass
class Settings:
    """Effective settings after merging CLI args, environment and config file."""
    provider: str
    model: Optional[str]
    count: int
    timeout: float
    ollama_url: str
    max_bytes: int
    retries: int
    max_subject_length: int
    ticket_prefix: str
    auto_commit: bool
    show_diff: bool
    api_key: Optional[str] = None


def resolve_settings(args, config: Config, environ: Mapping[str, str] = os.environ) -> Settings:
    """Merge settings. Precedence: CLI args > environment variables > config file."""
    def pick(arg_value, config_value):
        return arg_value if arg_value is not None else config_value

    return Settings(
        provider=args.provider or environ.get('COMMITTOR_PROVIDER') or config.provider,
        model=args.model or environ.get('COMMITTOR_MODEL') or config.model,
        count=pick(args.count, config.count),
        timeout=pick(args.timeout, config.timeout),
        ollama_url=args.ollama_url or environ.get('OLLAMA_HOST') or config.ollama_url,
        max_bytes=pick(args.max_bytes, config.max_diff_bytes),
        retries=pick(args.retries, config.retries),
        max_subject_length=config.max_subject_length,
        ticket_prefix=args.ticket_prefix or config.ticket_prefix,
        auto_commit=args.auto_commit or config.auto_commit,
        show_diff=args.show_diff or config.show_diff,
        api_key=args.api_key,
    )


def _api_key_for(provider: str, settings: Settings, environ: Mapping[str, str]) -> Optional[str]:
    if provider not in API_KEY_ENV:
        return None
    return settings.api_key or environ.get(API_KEY_ENV[provider])


def detect_provider(settings: Settings, environ: Mapping[str, str] = os.environ) -> str:
    """Pick a provider when set to 'auto'.

    Order: Ollama if reachable, else Claude if ANTHROPIC_API_KEY is set,
    else OpenAI if OPENAI_API_KEY is set.
    """
    if settings.provider != 'auto':
        return settings.provider

    if OllamaClient(host=settings.ollama_url).is_available():
        logger.debug("Auto-detected Ollama at %s", settings.ollama_url)
        return 'ollama'
    if environ.get('ANTHROPIC_API_KEY'):
        return 'claude'
    if environ.get('OPENAI_API_KEY'):
        return 'openai'

    raise ProviderUnavailable(
        f"No LLM provider available. Start Ollama ({settings.ollama_url}) "
        f"or set ANTHROPIC_API_KEY or OPENAI_API_KEY."
    )


def build_client(settings: Settings, environ: Mapping[str, str] = os.environ) -> LLMClient:
    provider = detect_provider(settings, environ)
    return get_client(
        provider=provider,
        model=settings.model,
        api_key=_api_key_for(provider, settings, environ),
        host=settings.ollama_url if provider == 'ollama' else None,
        timeout=settings.timeout,
    )


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
            stream=sys.stderr,
        )


def _ensure_model_loaded(client: LLMClient, is_pipe: bool) -> None:
    """Pre-load a local model so the first request doesn't eat the timeout."""
    if not isinstance(client, OllamaClient) or client.is_model_loaded():
        return
    if not is_pipe:
        print(dim("loading model... "), end='', flush=True)
    if not client.warmup() and not is_pipe:
        print(warning("warmup failed, generation may be slow... "), end='', flush=True)


def _attach_ticket(candidate: CommitCandidate, ticket: Optional[str], prefix: str) -> CommitCandidate:
    if not ticket:
        return candidate
    ticket_ref = f"{prefix}: {ticket.upper()}"
    body = f"{candidate.body}\n\n{ticket_ref}" if candidate.body else ticket_ref
    return candidate.with_body(body)


def _report_result(result: GenerationResult, is_pipe: bool) -> None:
    if is_pipe:
        return
    if result.truncated:
        print_warning("Diff was too large; some files were sent without their content")
    if result.redacted:
        print_warning(f"Redacted {result.redactions} credential-like value(s) before sending")


def _commit(repo: GitAnalyzer, candidate: CommitCandidate) -> int:
    try:
        short_hash = repo.commit(candidate.render())
    except GitError as e:
        print_error(str(e))
        return 1
    print_success(f"Committed {bold(short_hash)}: {candidate.subject}")
    return 0


def _generate_commit_flow(args, settings: Settings, client: LLMClient) -> int:
    """Generate candidates, show them and optionally commit one.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()
    is_interactive = sys.stdin.isatty() and not is_pipe

    try:
        repo = GitAnalyzer()
    except GitError as e:
        print_error(str(e))
        return 1

    generator = CommitGenerator(
        repo,
        client,
        max_bytes=settings.max_bytes,
        timeout=settings.timeout,
        retries=settings.retries,
        max_subject_length=settings.max_subject_length,
    )

    try:
        if settings.show_diff:
            print(generator.processor.collect(settings.max_bytes).text)
            print()

        _ensure_model_loaded(client, is_pipe)
        if not is_pipe:
            print(f"Generating {bold(str(settings.count))} candidates using {info(client.name)}... ",
                  end='', flush=True)
        with Spinner():
            result = generator.run(
                settings.count,
                branch=repo.current_branch(),
                recent_commits=repo.recent_commit_subjects(),
                hint=args.hint,
                forced_type=args.type,
            )
    except NoStagedChanges as e:
        if not is_pipe:
            print()
        print_error(str(e))
        return 1
    except GitError as e:
        print_error(str(e))
        return 1

    if not result.ok:
        if not is_pipe:
            print()
        print_error(str(result.error))
        return 1

    if not is_pipe:
        print(dim(f"done ({result.elapsed:.1f}s)"))
    _report_result(result, is_pipe)
    if args.verbose and not is_pipe:
        print(format_stats(result))

    candidates = [_attach_ticket(c, args.jira, settings.ticket_prefix) for c in result.candidates]

    if args.command == 'commit' and not settings.auto_commit:
        if is_interactive:
            idx = display_options(candidates)
            if idx is None:
                print(dim("Cancelled."))
                return 0
        else:
            idx = 0
        return _commit(repo, candidates[idx])

    if settings.auto_commit:
        return _commit(repo, candidates[0])

    if is_pipe:
        print(candidates[0].render())
    elif len(candidates) == 1:
        display_message(candidates[0])
    else:
        display_candidates(candidates)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _configure_logging(args.verbose)

    config = load_config()
    if args.command == 'config':
        return display_config(config)

    settings = resolve_settings(args, config)

    if args.command == 'diff':
        return run_diff(settings.max_bytes)

    try:
        client = build_client(settings)
    except LLMError as e:
        print_error(str(e))
        return 1

    if args.command == 'models':
        return run_models(client)
    if args.command == 'check':
        return run_check(client)
    if args.command == 'warmup':
        return run_warmup(client)

    return _generate_commit_flow(args, settings, client)
