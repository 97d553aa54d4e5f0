"""Claude (Anthropic) LLM Client"""

import logging

import anthropic

from committor.llm.base import (
    MAX_TOKENS,
    TEMPERATURE,
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
from committor.prompts.builder import DEFAULT_TIMEOUT, PromptRequest

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class ClaudeClient(LLMClient):
    """Claude API client. The API key is passed in by the caller."""

    provider = "claude"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str | None = None, model: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self._client = None
        if self.api_key:
            # Retries belong to the pipeline, not the SDK
            self._client = anthropic.Anthropic(api_key=self.api_key, timeout=timeout, max_retries=0)

    def is_available(self) -> bool:
        return self._client is not None

    def _require_client(self) -> anthropic.Anthropic:
        if self._client is None:
            raise ProviderUnavailable(
                "No API key found. Set ANTHROPIC_API_KEY environment variable:\n"
                "  export ANTHROPIC_API_KEY='your-key-here'"
            )
        return self._client

    def list_models(self) -> set[str]:
        client = self._require_client()
        try:
            return {model.id for model in client.models.list()}
        except anthropic.APIError as e:
            raise self._translate_error(e, self.model, self.timeout)

    def complete(self, request: PromptRequest) -> RawCompletion:
        client = self._require_client()
        model = request.model or self.model
        logger.debug("Sending %d-char prompt to Claude model %s", len(request.prompt), model)

        try:
            response = client.messages.create(
                model=model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                system=request.system,
                messages=[{"role": "user", "content": request.prompt}],
                timeout=request.timeout,
            )
        except anthropic.APIError as e:
            raise self._translate_error(e, model, request.timeout)

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text
                break

        return RawCompletion(
            text=strip_thinking_tags(content),
            model=model,
            provider=self.provider,
            success=response.stop_reason != "max_tokens",
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
        )

    def _translate_error(self, error: anthropic.APIError, model: str, timeout: float) -> LLMError:
        # APITimeoutError subclasses APIConnectionError, so it is checked first
        if isinstance(error, anthropic.APITimeoutError):
            return ProviderTimeout(f"Claude request timed out after {timeout}s")
        if isinstance(error, anthropic.APIConnectionError):
            return ProviderUnavailable(f"Could not reach the Claude API: {error}")
        if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
            return ProviderAuthFailed("Invalid API key. Check your ANTHROPIC_API_KEY.")
        if isinstance(error, anthropic.RateLimitError):
            return ProviderRateLimited("Claude API rate limit reached. Wait a moment and try again.")
        if isinstance(error, anthropic.NotFoundError):
            return ModelNotFound(f"Claude model '{model}' not found.")
        return LLMError(f"Claude API error: {error.message}")
