from __future__ import annotations

import asyncio
import gzip
from datetime import date
from typing import TYPE_CHECKING

import pytest

from readsync.adapters.myanimelist import MalXmlExportSource, parse_export, read_export_file
from readsync.domain.errors import SourceError, SourceErrorKind
from readsync.domain.model import DataSource, ReadingStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def test_parse_export_keeps_titled_manga_rows(read_fixture: Callable[[str], str]) -> None:
    entries = parse_export(read_fixture("mal_manga_export.xml"))

    assert [entry.title for entry in entries] == [
        "One Piece",
        "Berserk",
        "Le Voyage de Chihiro",
        "Rurouni Kenshin",
    ]
    assert entries[2].manga_id is None
    assert entries[2].read_chapters == 0
    assert entries[1].comments is None


def test_export_source_translates_rows(read_fixture: Callable[[str], str]) -> None:
    source = MalXmlExportSource()

    candidates = asyncio.run(source.fetch(read_fixture("mal_manga_export.xml")))

    one_piece, berserk, chihiro, kenshin = candidates
    assert source.data_source is DataSource.MYANIMELIST
    assert one_piece.status is ReadingStatus.READING
    assert one_piece.external_id == "13"
    assert one_piece.chapters_read == 1095
    assert one_piece.volumes_read == 105
    assert one_piece.score == 9
    assert one_piece.start_date == date(2015, 4, 1)
    assert one_piece.finish_date is None
    assert one_piece.notes == "weekly"

    assert berserk.status is ReadingStatus.COMPLETED
    assert berserk.finish_date == date(2021, 9, 10)

    assert chihiro.status is ReadingStatus.PLAN_TO_READ
    assert chihiro.external_id is None
    assert chihiro.chapters_read is None
    assert chihiro.score is None

    assert kenshin.status is None
    assert kenshin.raw_status == "5"


def test_anime_export_is_rejected(read_fixture: Callable[[str], str]) -> None:
    with pytest.raises(SourceError) as excinfo:
        parse_export(read_fixture("mal_anime_export.xml"))

    assert excinfo.value.kind is SourceErrorKind.WRONG_EXPORT_TYPE
    assert "anime list" in str(excinfo.value)


@pytest.mark.parametrize(
    "document",
    [
        "<myanimelist><manga>",
        "not xml at all",
        "<animelist><manga><manga_title>X</manga_title></manga></animelist>",
    ],
)
def test_malformed_documents_fail_to_parse(document: str) -> None:
    with pytest.raises(SourceError) as excinfo:
        parse_export(document)

    assert excinfo.value.kind is SourceErrorKind.PARSE_FAILURE


def test_export_without_manga_rows_has_no_entries() -> None:
    document = "<myanimelist><myinfo><user_export_type>2</user_export_type></myinfo></myanimelist>"

    with pytest.raises(SourceError) as excinfo:
        parse_export(document)

    assert excinfo.value.kind is SourceErrorKind.NO_ENTRIES
    assert str(excinfo.value) == "No manga entries found in the export file."


def test_export_without_myinfo_is_accepted() -> None:
    document = (
        "<myanimelist><manga><manga_title>Monster</manga_title>"
        "<my_status>2</my_status></manga></myanimelist>"
    )

    (entry,) = parse_export(document)

    assert entry.title == "Monster"
    assert entry.status == "2"


def test_read_export_file_accepts_gzip(tmp_path: Path, read_fixture: Callable[[str], str]) -> None:
    text = read_fixture("mal_manga_export.xml")
    path = tmp_path / "mangalist.xml.gz"
    path.write_bytes(gzip.compress(text.encode("utf-8")))

    assert read_export_file(path) == text


def test_read_export_file_rejects_binary(tmp_path: Path) -> None:
    path = tmp_path / "mangalist.xml"
    path.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(SourceError) as excinfo:
        read_export_file(path)

    assert excinfo.value.kind is SourceErrorKind.PARSE_FAILURE
