from __future__ import annotations

import pytest

from app.core.errors import ErrorCode
from app.services.questionnaires.csv_importer import QuestionnaireCsvImporter, QuestionnaireImportError
from app.services.questionnaires.import_rows import (
    REQUIRED_HEADERS,
    CsvParseError,
    find_missing_headers,
    read_csv_document,
)
from tests.utils.csv_rows import build_csv, question_row


def test_read_csv_document_strips_bom_and_numbers_rows_from_two() -> None:
    content = build_csv([question_row(question="Q1"), question_row(question="Q2")], bom=True)

    document = read_csv_document(content)

    assert document.headers[0] == "section_title"
    assert [row.row_number for row in document.rows] == [2, 3]
    assert [row.question_title for row in document.rows] == ["Q1", "Q2"]


def test_read_csv_document_pads_short_rows_and_ignores_extra_cells() -> None:
    header = ",".join(REQUIRED_HEADERS)
    short = "Safety,1,Training,1,Q1,Text"
    long = "Safety,1,Training,1,Q2,Text,,2,Yes,1" + ",x" * 25
    content = "\n".join([header, short, long]).encode("utf-8")

    document = read_csv_document(content)

    first, second = document.rows
    assert first.question_context == ""
    assert first.question_order == ""
    assert all(slot.value == "" for slot in first.ratings)
    assert second.question_order == "2"
    assert second.ratings[0].description == "Yes"
    assert second.ratings[0].value == "1"


def test_read_csv_document_trims_values_and_headers() -> None:
    header = ",".join(f" {name} " for name in REQUIRED_HEADERS)
    row = "  Safety , 1 , Training ,1,  Q1  ,Text,,1, Yes , 2 "
    document = read_csv_document(f"{header}\n{row}\n".encode("utf-8"))

    assert find_missing_headers(document.headers) == []
    parsed = document.rows[0]
    assert parsed.section_title == "Safety"
    assert parsed.section_order == "1"
    assert parsed.question_title == "Q1"
    assert parsed.ratings[0].description == "Yes"
    assert parsed.ratings[0].value == "2"


def test_read_csv_document_skips_blank_rows_but_keeps_numbering() -> None:
    header = ",".join(REQUIRED_HEADERS)
    row = "Safety,1,Training,1,Q1,Text,,1,Yes,1"
    content = "\n".join([header, ",,,", row, ""]).encode("utf-8")

    document = read_csv_document(content)

    assert [item.row_number for item in document.rows] == [3]


def test_read_csv_document_handles_quoted_commas_and_newlines() -> None:
    header = ",".join(REQUIRED_HEADERS)
    row = 'Safety,1,Training,1,Q1,"Is it safe, really?","line one\nline two",1,"Yes, always",1'
    document = read_csv_document(f"{header}\n{row}\n".encode("utf-8"))

    parsed = document.rows[0]
    assert parsed.question_text == "Is it safe, really?"
    assert parsed.question_context == "line one\nline two"
    assert parsed.ratings[0].description == "Yes, always"


def test_read_csv_document_rejects_empty_input() -> None:
    with pytest.raises(CsvParseError):
        read_csv_document(b"")


def test_read_csv_document_rejects_invalid_utf8() -> None:
    with pytest.raises(CsvParseError):
        read_csv_document(b"section_title\n\xff\xfe\xfa\n")


def test_read_csv_document_rejects_unterminated_quote() -> None:
    header = ",".join(REQUIRED_HEADERS)
    content = f'{header}\nSafety,1,Training,1,Q1,"unterminated'.encode("utf-8")

    with pytest.raises(CsvParseError):
        read_csv_document(content)


def test_find_missing_headers_lists_in_canonical_order() -> None:
    headers = [name for name in REQUIRED_HEADERS if name not in ("question_order", "rating_value_10")]

    assert find_missing_headers(headers) == ["question_order", "rating_value_10"]


def test_importer_reports_missing_headers_before_row_checks() -> None:
    headers = [name for name in REQUIRED_HEADERS if name != "question_order"]
    # The only data row is also invalid, which must not be reported.
    content = build_csv([question_row(section="")], headers=headers)

    with pytest.raises(QuestionnaireImportError) as exc_info:
        QuestionnaireCsvImporter().prepare(content)

    exc = exc_info.value
    assert exc.error_code is ErrorCode.QUESTIONNAIRES_IMPORT_HEADERS_MISSING
    assert exc.missing_headers == ["question_order"]
    assert exc.detail == "Missing required headers: question_order"
    assert exc.errors == []


def test_importer_wraps_parse_failures() -> None:
    with pytest.raises(QuestionnaireImportError) as exc_info:
        QuestionnaireCsvImporter().prepare(b"\xff\xfe\x00garbage")

    exc = exc_info.value
    assert exc.error_code is ErrorCode.QUESTIONNAIRES_IMPORT_PARSE_FAILED
    assert exc.detail.startswith("Failed to parse CSV: ")


def test_header_only_file_yields_empty_graph() -> None:
    result = QuestionnaireCsvImporter().prepare(build_csv([]))

    assert result.errors == []
    assert result.graph is not None
    assert result.graph.summary() == {
        "sections": 0,
        "steps": 0,
        "questions": 0,
        "rating_scales": 0,
        "question_rating_scales": 0,
    }
