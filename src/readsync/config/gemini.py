"""Gemini text-generation configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
GEMINI_MAX_OUTPUT_TOKENS = 1024
GEMINI_THINKING_BUDGET = 2048


@dataclass(frozen=True, slots=True)
class GeminiConfig:
    api_key: str
    model: str = DEFAULT_GEMINI_MODEL
    max_output_tokens: int = GEMINI_MAX_OUTPUT_TOKENS
    thinking_budget: int = GEMINI_THINKING_BUDGET
    temperature: float = 0.0


def get_gemini_config() -> GeminiConfig:
    values = require_env_vars(("GEMINI_API_KEY",))
    model = os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL
    return GeminiConfig(api_key=values["GEMINI_API_KEY"], model=model)
