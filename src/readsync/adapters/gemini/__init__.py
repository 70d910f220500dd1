"""Public interface for the Gemini adapter."""

from __future__ import annotations

from .client import GeminiTextClient

__all__ = ["GeminiTextClient"]
