"""LLM Client Package"""

from committor.llm.base import (
    LLMClient,
    LLMError,
    ModelNotFound,
    ProviderAuthFailed,
    ProviderRateLimited,
    ProviderTimeout,
    ProviderUnavailable,
    RawCompletion,
    strip_thinking_tags,
)
from committor.llm.claude import ClaudeClient
from committor.llm.ollama import OllamaClient
from committor.llm.openai_client import OpenAIClient
from committor.prompts.builder import DEFAULT_TIMEOUT

PROVIDERS = {
    "claude": ClaudeClient,
    "openai": OpenAIClient,
    "ollama": OllamaClient,
}


def get_client(
    provider: str,
    model: str | None = None,
    api_key: str | None = None,
    host: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> LLMClient:
    """Build a client from explicit settings. Provider is 'claude', 'openai' or 'ollama'."""
    if provider == "ollama":
        return OllamaClient(model=model, host=host, timeout=timeout)
    if provider == "claude":
        return ClaudeClient(api_key=api_key, model=model, timeout=timeout)
    if provider == "openai":
        return OpenAIClient(api_key=api_key, model=model, timeout=timeout, base_url=host)

    raise LLMError(f"Unknown provider: {provider}. Use one of: {', '.join(PROVIDERS)}.")


__all__ = [
    "LLMClient",
    "LLMError",
    "ModelNotFound",
    "ProviderAuthFailed",
    "ProviderRateLimited",
    "ProviderTimeout",
    "ProviderUnavailable",
    "RawCompletion",
    "strip_thinking_tags",
    "ClaudeClient",
    "OllamaClient",
    "OpenAIClient",
    "PROVIDERS",
    "get_client",
]
