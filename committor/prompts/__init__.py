"""Prompt Construction Package"""

from committor.prompts.builder import SYSTEM_PROMPT, PromptBuilder, PromptRequest
from committor.prompts.context import ContextHints

__all__ = [
    "SYSTEM_PROMPT",
    "PromptBuilder",
    "PromptRequest",
    "ContextHints",
]
