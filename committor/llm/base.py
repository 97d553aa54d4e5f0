"""LLM Base Classes and Shared Code"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from committor.prompts.builder import PromptRequest

MAX_TOKENS = 1000
TEMPERATURE = 0.4

_THINKING_RE = re.compile(
    r'<(think|thinking|thought|reasoning)>.*?</\1>',
    re.DOTALL | re.IGNORECASE,
)


def strip_thinking_tags(text: str) -> str:
    """Remove <think>...</think> style reasoning blocks some local models emit."""
    return _THINKING_RE.sub('', text).strip()


@dataclass
class RawCompletion:
    """Unparsed text returned by a provider for one request."""
    text: str
    model: str = ""
    provider: str = ""
    success: bool = True
    tokens_used: int = 0


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class ProviderUnavailable(LLMError):
    """Backend unreachable or not configured."""
    pass


class ProviderAuthFailed(LLMError):
    """Credential rejected by the backend."""
    pass


class ProviderRateLimited(LLMError):
    """Backend refused the request because of rate limits."""
    pass


class ProviderTimeout(LLMError):
    """A completion call exceeded its timeout."""
    pass


class ModelNotFound(LLMError):
    """Backend is reachable but does not have the requested model."""
    pass


class LLMClient(ABC):
    """Abstract base for LLM clients.

    The pipeline only relies on complete(), list_models() and
    is_available(); nothing downstream checks which subclass it holds.
    """

    provider: str = ""
    DEFAULT_MODEL = ""

    model: str
    timeout: float

    @abstractmethod
    def complete(self, request: PromptRequest) -> RawCompletion:
        pass

    @abstractmethod
    def list_models(self) -> set[str]:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @property
    def endpoint(self) -> str | None:
        return None

    @property
    def name(self) -> str:
        return f"{self.provider.capitalize()} ({self.model})"
