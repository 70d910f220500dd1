"""Gemini text generation through the google-genai SDK."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from google import genai
from google.genai import types

from readsync.config.gemini import GeminiConfig, get_gemini_config

if TYPE_CHECKING:
    from readsync.domain.ports import GenerativeTextClient

log = getLogger(__name__)


def _default_client(config: GeminiConfig) -> genai.Client:
    return genai.Client(api_key=config.api_key)


@dataclass(slots=True)
class GeminiTextClient:
    """Single-turn prompts against one Gemini model.

    With ``search_grounding`` the Google Search tool is attached so the model can
    look titles up instead of translating them literally.
    """

    config: GeminiConfig = field(default_factory=get_gemini_config)
    client: genai.Client | None = None

    def _client(self) -> genai.Client:
        if self.client is None:
            self.client = _default_client(self.config)
        return self.client

    def _generation_config(self, *, search_grounding: bool) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if search_grounding else None
        return types.GenerateContentConfig(
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_output_tokens,
            thinking_config=types.ThinkingConfig(thinking_budget=self.config.thinking_budget),
            tools=tools,
        )

    async def generate(self, prompt: str, *, search_grounding: bool = False) -> str:
        response = await self._client().aio.models.generate_content(
            model=self.config.model,
            contents=prompt,
            config=self._generation_config(search_grounding=search_grounding),
        )
        text = response.text
        if not text:
            reason = response.candidates[0].finish_reason if response.candidates else None
            log.warning("Gemini returned an empty reply (finish reason: %s)", reason)
            return ""
        return text


if TYPE_CHECKING:
    _client_check: GenerativeTextClient = GeminiTextClient()
