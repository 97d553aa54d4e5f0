"""CLI Argument Parsing"""

import argparse
import argcomplete

from committor import COMMIT_TYPE_NAMES, __version__

COMMANDS = ['generate', 'commit', 'diff', 'models', 'check', 'warmup', 'config']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='committor',
        description='Generate conventional commit messages for staged changes',
        epilog='Example: committor commit -n 3',
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        'command', nargs='?', default='generate', choices=COMMANDS,
        help='generate (default): show candidates; commit: pick one and commit; '
             'diff: show what would be sent; models/check/warmup: provider tools; config: show settings',
    )

    # Generation options
    parser.add_argument('-n', '--count', type=int, metavar='N', help='Number of candidates to generate (default: 3)')
    parser.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "fixing the login bug"')
    parser.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    parser.add_argument('-j', '--jira', type=str, metavar='TICKET', help='Add JIRA ticket: -j PROJ-123')
    parser.add_argument('--ticket-prefix', type=str, metavar='PREFIX', help='Ticket reference prefix (default: Refs)')
    parser.add_argument('--max-bytes', type=int, metavar='BYTES', help='Diff budget sent to the model (default: 12000)')
    parser.add_argument('--retries', type=int, metavar='N', help='Extra attempts after a timeout or unusable reply (default: 1)')

    # LLM options
    parser.add_argument('-p', '--provider', type=str, choices=['auto', 'claude', 'openai', 'ollama'], help='LLM provider')
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')
    parser.add_argument('--timeout', type=float, metavar='SECONDS', help='Per-request timeout (default: 60)')
    parser.add_argument('--ollama-url', type=str, metavar='URL', help='Ollama server (default: http://localhost:11434)')
    parser.add_argument('--api-key', type=str, metavar='KEY', help='API key for Claude or OpenAI')

    # Output options
    parser.add_argument('-y', '--auto-commit', action='store_true', help='Commit the first candidate without asking')
    parser.add_argument('--show-diff', action='store_true', help='Print the sanitized diff before generating')
    parser.add_argument('--verbose', action='store_true', help='Show debug logs and timing stats')

    argcomplete.autocomplete(parser)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.count is not None and args.count < 1:
        build_parser().error("--count must be at least 1")
    if args.retries is not None and args.retries < 0:
        build_parser().error("--retries cannot be negative")
    if args.timeout is not None and args.timeout <= 0:
        build_parser().error("--timeout must be positive")
    if args.max_bytes is not None and args.max_bytes < 1:
        build_parser().error("--max-bytes must be at least 1")
    return args
