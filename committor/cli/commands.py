"""CLI Commands"""

import os
import time

from committor.config import Config, get_config_path
from committor.git import DiffProcessor, GitAnalyzer, GitError, NoStagedChanges
from committor.llm import LLMClient, LLMError, OllamaClient
from committor.output import bold, dim, info, print_success, print_error, print_warning, CHECK, CROSS

ENV_OVERRIDES = ['COMMITTOR_PROVIDER', 'COMMITTOR_MODEL', 'OLLAMA_HOST']


def display_config(config: Config) -> int:
    """Display current configuration."""
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .committorrc found)")

    overrides = [name for name in ENV_OVERRIDES if os.environ.get(name)]
    if overrides:
        print(f"  {dim('Environment overrides:')}")
        for name in overrides:
            print(f"    {name}={os.environ[name]}")

    print()
    print(f"  {bold('Settings:')}")
    for key, value in config.to_dict().items():
        print(f"    {key + ':':<20}{info(str(value).lower() if isinstance(value, bool) else str(value))}")
    if config.model is None:
        print(f"    {'model:':<20}{info('provider default')}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .committorrc (in current directory)")
    print(f"    Global: ~/.committorrc\n")

    return 0


def run_diff(max_bytes: int) -> int:
    """Print the sanitized diff exactly as it would be sent to the model."""
    try:
        diff = DiffProcessor(GitAnalyzer()).collect(max_bytes)
    except (GitError, NoStagedChanges) as e:
        print_error(str(e))
        return 1

    print(diff.text)
    if diff.redacted:
        print_warning(f"Redacted {diff.redactions} credential-like value(s)")
    return 0


def run_models(client: LLMClient) -> int:
    """List models offered by the selected provider."""
    try:
        models = client.list_models()
    except LLMError as e:
        print_error(str(e))
        return 1

    if not models:
        print(dim(f"No models reported by {client.provider}"))
        return 0
    for name in sorted(models):
        marker = info(CHECK) if name == client.model else ' '
        print(f"{marker} {name}")
    return 0


def run_check(client: LLMClient) -> int:
    """Availability probe of the selected provider."""
    print(f"{bold(client.name)}")
    if client.endpoint:
        print(dim(f"  endpoint: {client.endpoint}"))

    if not client.is_available():
        print_error(f"{client.provider} is not available")
        return 1
    print_success(f"{client.provider} is available")

    try:
        models = client.list_models()
    except LLMError as e:
        print_warning(f"Could not list models: {e}")
        return 0

    if models and client.model not in models:
        print(f"  {CROSS} model {bold(client.model)} not found ({len(models)} available)")
        return 1
    print(dim(f"  {len(models)} models available"))
    return 0


def run_warmup(client: LLMClient) -> int:
    """Pre-load Ollama model into memory."""
    if not isinstance(client, OllamaClient):
        print_error("warmup only works with Ollama (local models)")
        return 1

    if client.is_model_loaded():
        print_success(f"Model {bold(client.model)} is already loaded")
        return 0

    print(f"Loading {bold(client.model)}... ", end='', flush=True)
    start = time.time()
    loaded = client.warmup()
    elapsed = time.time() - start

    if loaded:
        print_success(f"ready! ({elapsed:.1f}s)")
        print(dim(f"Model will stay loaded for ~{client.KEEP_ALIVE}"))
        return 0
    print_error("failed to load model")
    return 1
