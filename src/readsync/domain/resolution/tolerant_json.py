"""Recover a JSON value from free-form generative replies.

Replies may be bare JSON, JSON inside a Markdown code fence, or JSON embedded
in prose. Strategies are tried in that order, then a best-effort slice between
the outermost braces and finally brackets. When nothing parses the decoder
returns an empty object instead of raising.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator
from logging import getLogger

log = getLogger(__name__)

type ReplyDecoder = Callable[[str], object]

_CODE_FENCE = re.compile(r"```(?:json|JSON)?[ \t]*\n?(.*?)```", re.DOTALL)


def decode_tolerant_json(text: str) -> object:
    trimmed = text.strip()
    if not trimmed:
        return {}

    for candidate in _candidate_documents(trimmed):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    log.warning("Could not extract JSON from reply: %.120r", trimmed)
    return {}


def _candidate_documents(text: str) -> Iterator[str]:
    yield text

    fence = _CODE_FENCE.search(text)
    if fence is not None:
        yield fence.group(1).strip()

    yield from _outer_slice(text, "{", "}")
    yield from _outer_slice(text, "[", "]")


def _outer_slice(text: str, opening: str, closing: str) -> Iterator[str]:
    start = text.find(opening)
    end = text.rfind(closing)
    if start != -1 and end > start:
        yield text[start : end + 1]
