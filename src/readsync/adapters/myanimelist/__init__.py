"""Public interface for the MyAnimeList adapter."""

from __future__ import annotations

from .client import MalApiSource, validate_username
from .schema import MalXmlEntry, MangaListPage
from .translator import candidate_from_api, candidate_from_xml, parse_mal_date
from .xml_export import MalXmlExportSource, parse_export, read_export_file

__all__ = [
    "MalApiSource",
    "MalXmlEntry",
    "MalXmlExportSource",
    "MangaListPage",
    "candidate_from_api",
    "candidate_from_xml",
    "parse_export",
    "parse_mal_date",
    "read_export_file",
    "validate_username",
]
