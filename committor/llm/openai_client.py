"""OpenAI LLM Client"""

import logging

import openai

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


class OpenAIClient(LLMClient):
    """OpenAI chat completions client. Works with any OpenAI-compatible base_url."""

    provider = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, api_key: str | None = None, model: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT, base_url: str | None = None):
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self.base_url = base_url
        self._client = None
        if self.api_key:
            self._client = openai.OpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

    @property
    def endpoint(self) -> str | None:
        return self.base_url

    def is_available(self) -> bool:
        return self._client is not None

    def _require_client(self) -> openai.OpenAI:
        if self._client is None:
            raise ProviderUnavailable(
                "No API key found. Set OPENAI_API_KEY environment variable:\n"
                "  export OPENAI_API_KEY='your-key-here'"
            )
        return self._client

    def list_models(self) -> set[str]:
        client = self._require_client()
        try:
            return {model.id for model in client.models.list()}
        except openai.APIError as e:
            raise self._translate_error(e, self.model, self.timeout)

    def complete(self, request: PromptRequest) -> RawCompletion:
        client = self._require_client()
        model = request.model or self.model
        logger.debug("Sending %d-char prompt to OpenAI model %s", len(request.prompt), model)

        try:
            response = client.chat.completions.create(
                model=model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                messages=[
                    {"role": "system", "content": request.system},
                    {"role": "user", "content": request.prompt},
                ],
                timeout=request.timeout,
            )
        except openai.APIError as e:
            raise self._translate_error(e, model, request.timeout)

        if not response.choices:
            raise LLMError("OpenAI returned no choices")

        choice = response.choices[0]
        return RawCompletion(
            text=strip_thinking_tags(choice.message.content or ""),
            model=model,
            provider=self.provider,
            success=choice.finish_reason != "length",
            tokens_used=response.usage.total_tokens if response.usage else 0,
        )

    def _translate_error(self, error: openai.APIError, model: str, timeout: float) -> LLMError:
        # APITimeoutError subclasses APIConnectionError, so it is checked first
        if isinstance(error, openai.APITimeoutError):
            return ProviderTimeout(f"OpenAI request timed out after {timeout}s")
        if isinstance(error, openai.APIConnectionError):
            return ProviderUnavailable(f"Could not reach the OpenAI API: {error}")
        if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return ProviderAuthFailed("Invalid API key. Check your OPENAI_API_KEY.")
        if isinstance(error, openai.RateLimitError):
            return ProviderRateLimited("OpenAI API rate limit reached. Wait a moment and try again.")
        if isinstance(error, openai.NotFoundError):
            return ModelNotFound(f"OpenAI model '{model}' not found.")
        return LLMError(f"OpenAI API error: {error.message}")
