"""Terminal Output Formatting Package

Status lines (warnings, errors, spinner) go to stderr so that piping
``committor`` only ever yields the commit message on stdout.
"""

import os
import sys
import threading

from committor.commit.candidate import HEADER_RE


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except (AttributeError, OSError):
            return False
    return True


def _supports_unicode() -> bool:
    try:
        '✓⠋─'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
WARN = '⚠' if UNICODE_ENABLED else '[!]'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}", file=sys.stderr)


COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'test': Colors.MAGENTA,
    'perf': Colors.GREEN,
    'chore': Colors.DIM,
    'style': Colors.DIM,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
}


def colorize_commit_type(message: str) -> str:
    """Color the `type(scope)!:` prefix on the first line of a commit message."""
    if not COLORS_ENABLED:
        return message
    subject, sep, rest = message.partition('\n')
    match = HEADER_RE.match(subject)
    if not match:
        return message
    color = COMMIT_TYPE_COLORS.get(match.group('type').lower())
    if not color:
        return message
    prefix_end = match.start('description')
    colored = _colorize(subject[:prefix_end], Colors.BOLD, color) + subject[prefix_end:]
    return colored + sep + rest


class Spinner:
    """Animated spinner on stderr for long operations. Use as context manager."""
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, stream=None):
        self._stream = stream or sys.stderr
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    def _enabled(self) -> bool:
        return hasattr(self._stream, 'isatty') and self._stream.isatty()

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{frame} ', end='', flush=True, file=self._stream)
            idx += 1
            self._stop_event.wait(0.08)

    def __enter__(self):
        if self._enabled():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if self._enabled():
            print('\r\033[K', end='', flush=True, file=self._stream)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "WARN",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning",
    "colorize_commit_type", "Spinner", "COMMIT_TYPE_COLORS",
]
