"""Prompt sent to the generative service for one unresolved title."""

from __future__ import annotations

_TEMPLATE = """\
What is the MyAnimeList manga entry name for the manga published as "{title}"?

Search the web to find the correct MyAnimeList entry. Do NOT translate the title literally.

Respond with ONLY a JSON object (no markdown, no explanation):
{{"french":{quoted},"english":"...","japanese":"...","romaji":"...","nsfw":false}}

- "romaji": the main title on MyAnimeList (usually romanized Japanese)
- "english": the English title on MyAnimeList (null if the main title is already in romaji)
- "japanese": the Japanese title in kanji/kana (null if unknown)
- "nsfw": true if this manga is adult/hentai/ecchi/pornographic
- If you cannot find the MyAnimeList entry, set english/japanese/romaji to null"""


def build_title_prompt(title: str) -> str:
    quoted = '"' + title.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return _TEMPLATE.format(title=title, quoted=quoted)
