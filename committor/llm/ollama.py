"""Ollama LLM Client for Local Models"""

import http.client
import json
import logging
import socket
import urllib.error
import urllib.request

from committor.llm.base import (
    MAX_TOKENS,
    TEMPERATURE,
    LLMClient,
    LLMError,
    ModelNotFound,
    ProviderTimeout,
    ProviderUnavailable,
    RawCompletion,
    strip_thinking_tags,
)
from committor.prompts.builder import DEFAULT_TIMEOUT, PromptRequest

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_CONNECTION_ERRORS = (urllib.error.URLError, OSError, http.client.HTTPException, json.JSONDecodeError)


class OllamaClient(LLMClient):
    """Ollama client for local models. Requires: ollama serve"""

    provider = "ollama"
    DEFAULT_MODEL = "mistral:7b"
    DEFAULT_HOST = "http://localhost:11434"
    PROBE_TIMEOUT = 5
    KEEP_ALIVE = "10m"

    def __init__(self, model: str | None = None, host: str | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.model = model or self.DEFAULT_MODEL
        self.host = (host or self.DEFAULT_HOST).rstrip('/')
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return self.host

    def _get_json(self, path: str, timeout: float) -> dict:
        req = urllib.request.Request(f"{self.host}{path}")
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def _post_json(self, path: str, payload: dict, timeout: float) -> dict:
        data = json.dumps(payload).encode('utf-8')
        req = urllib.request.Request(
            f"{self.host}{path}", data=data, headers={"Content-Type": "application/json"}
        )
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def is_available(self) -> bool:
        """Reachability probe with a short fixed timeout."""
        try:
            self._get_json('/api/tags', self.PROBE_TIMEOUT)
            return True
        except _CONNECTION_ERRORS:
            return False

    def list_models(self) -> set[str]:
        try:
            data = self._get_json('/api/tags', self.PROBE_TIMEOUT * 2)
        except urllib.error.URLError as e:
            raise ProviderUnavailable(f"Ollama not reachable at {self.host}: {e.reason}")
        except (OSError, http.client.HTTPException, json.JSONDecodeError) as e:
            raise ProviderUnavailable(f"Ollama not reachable at {self.host}: {e}")
        if not isinstance(data, dict):
            raise ProviderUnavailable(f"Unexpected model list from {self.host}")
        return {m.get('name', '') for m in data.get('models', []) if m.get('name')}

    def is_model_loaded(self) -> bool:
        """Check if the model is currently loaded in memory."""
        try:
            data = self._get_json('/api/ps', self.PROBE_TIMEOUT)
        except _CONNECTION_ERRORS:
            return False
        if not isinstance(data, dict):
            return False
        loaded_models = [m.get('name', '') for m in data.get('models', [])]
        return any(self.model in m or m in self.model for m in loaded_models)

    def warmup(self) -> bool:
        """Pre-load the model with a tiny request. Returns True once loaded."""
        if self.is_model_loaded():
            return True

        payload = {
            "model": self.model,
            "prompt": "hi",
            "stream": False,
            "options": {"num_predict": 1},
            "keep_alive": self.KEEP_ALIVE,
        }
        try:
            self._post_json('/api/generate', payload, self.timeout)
        except _CONNECTION_ERRORS as e:
            logger.warning("Warmup of %s failed: %s", self.model, e)
            return False
        return True

    def complete(self, request: PromptRequest) -> RawCompletion:
        """Call Ollama's generate API once."""
        model = request.model or self.model
        payload = {
            "model": model,
            "prompt": request.prompt,
            "system": request.system,
            "stream": False,
            "keep_alive": self.KEEP_ALIVE,
            "options": {
                "temperature": TEMPERATURE,
                "num_predict": MAX_TOKENS,
            },
        }
        logger.debug("Sending %d-char prompt to Ollama model %s at %s", len(request.prompt), model, self.host)

        try:
            result = self._post_json('/api/generate', payload, request.timeout)
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise ModelNotFound(f"Model '{model}' not found. Run: ollama pull {model}")
            raise LLMError(f"Ollama error ({e.code}): {e.reason}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise ProviderTimeout(self._timeout_message(request.timeout))
            raise ProviderUnavailable(f"Ollama not running at {self.host}. Start with: ollama serve")
        except (socket.timeout, TimeoutError):
            raise ProviderTimeout(self._timeout_message(request.timeout))
        except json.JSONDecodeError:
            raise LLMError("Invalid response from Ollama. Try a different model or simpler change.")
        except http.client.HTTPException as e:
            raise LLMError(f"Incomplete response from Ollama: {e}. The model may have run out of memory.")
        except OSError as e:
            raise ProviderUnavailable(f"Connection to Ollama lost: {e}. Check that 'ollama serve' is still running.")

        if not isinstance(result, dict):
            raise LLMError("Invalid response from Ollama. Try a different model or simpler change.")
        if result.get("error"):
            raise LLMError(f"Ollama error: {result['error']}")

        return RawCompletion(
            text=strip_thinking_tags(result.get("response", "")),
            model=model,
            provider=self.provider,
            success=bool(result.get("done", True)),
            tokens_used=result.get("eval_count", 0),
        )

    def _timeout_message(self, timeout: float) -> str:
        return (
            f"Request timed out after {timeout}s. Try:\n"
            f"  - Pre-load model: committor warmup\n"
            f"  - Increase timeout: committor --timeout 300"
        )
