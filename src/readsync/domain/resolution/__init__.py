"""AI-assisted resolution of titles the catalog matcher cannot place."""

from __future__ import annotations

from .prompt import build_title_prompt
from .resolver import AiTitleResolver
from .schema import TranslationReply, parse_translation
from .tolerant_json import ReplyDecoder, decode_tolerant_json

__all__ = [
    "AiTitleResolver",
    "ReplyDecoder",
    "TranslationReply",
    "build_title_prompt",
    "decode_tolerant_json",
    "parse_translation",
]
