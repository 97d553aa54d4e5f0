"""Redaction - Mask credential-like values in diff text before it leaves the machine."""

import re
from dataclasses import dataclass

PLACEHOLDER = "[REDACTED]"

# Key names whose values are always masked
STRONG_KEYS = [
    r'api[_-]?key', r'access[_-]?key', r'secret', r'client[_-]?secret',
    r'password', r'passwd', r'pwd', r'token', r'auth[_-]?token',
    r'private[_-]?key', r'credentials?', r'database[_-]?url', r'connection[_-]?string',
]

# Broad names that also label ordinary code, e.g. key=self.sort_order
GENERIC_KEYS = [r'key', r'auth']

SENSITIVE_KEYS = STRONG_KEYS + GENERIC_KEYS

_STRONG_KEY_RE = re.compile('|'.join(STRONG_KEYS), re.IGNORECASE)
_IDENTIFIER_RE = re.compile(r'[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+')

# key=VALUE, key: VALUE, "key": "VALUE", KEY_TOKEN = 'VALUE'
_KEY_VALUE_RE = re.compile(
    r'(?P<key>[\w.-]*(?:' + '|'.join(SENSITIVE_KEYS) + r')[\w.-]*["\']?)'
    r'(?P<sep>\s*[:=]\s*)'
    r'(?P<quote>["\']?)'
    r'(?P<value>[A-Za-z0-9_\-./+=@:]{8,})',
    re.IGNORECASE,
)

_BEARER_RE = re.compile(r'(?P<prefix>\bBearer\s+)(?P<value>[A-Za-z0-9_\-.=+/]{8,})', re.IGNORECASE)

# Well-known credential shapes that show up without a key name
_KNOWN_TOKEN_RES = [
    re.compile(r'\bsk-[A-Za-z0-9_\-]{16,}'),        # OpenAI / Anthropic style
    re.compile(r'\bgh[pousr]_[A-Za-z0-9]{20,}'),    # GitHub tokens
    re.compile(r'\bAKIA[0-9A-Z]{16}\b'),             # AWS access key id
    re.compile(r'\bxox[abpr]-[A-Za-z0-9-]{10,}'),    # Slack tokens
    re.compile(r'-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----', re.DOTALL),
]


def _is_code_reference(match: re.Match) -> bool:
    """Dotted names and calls such as self.sort_order or get_value(x)."""
    value = match.group('value')
    if _IDENTIFIER_RE.fullmatch(value):
        return True
    return match.string[match.end():match.end() + 1] == '('


def _is_sensitive(match: re.Match) -> bool:
    key = match.groupdict().get('key')
    if key is None or _STRONG_KEY_RE.search(key):
        return True
    return not _is_code_reference(match)


@dataclass
class RedactionResult:
    text: str
    count: int = 0


class Redactor:
    """Replaces credential-like substrings with PLACEHOLDER.

    Every pattern is applied on every call; there is no switch to turn the
    pass off.
    """

    def __init__(self, placeholder: str = PLACEHOLDER):
        self.placeholder = placeholder

    def redact(self, text: str) -> RedactionResult:
        if not text:
            return RedactionResult(text=text)

        count = 0

        def _mask_value(match: re.Match) -> str:
            nonlocal count
            if not _is_sensitive(match):
                return match.group(0)
            count += 1
            head = match.group(0)[:match.start('value') - match.start(0)]
            return f"{head}{self.placeholder}"

        def _mask_all(match: re.Match) -> str:
            nonlocal count
            count += 1
            return self.placeholder

        text = _KEY_VALUE_RE.sub(_mask_value, text)
        text = _BEARER_RE.sub(_mask_value, text)
        for pattern in _KNOWN_TOKEN_RES:
            text = pattern.sub(_mask_all, text)

        return RedactionResult(text=text, count=count)


def redact(text: str) -> str:
    """Convenience wrapper returning only the redacted text."""
    return Redactor().redact(text).text
