"""Tokenizing questionnaire CSV uploads into typed rows.

The CSV layout is denormalized: every data row repeats its section and
step and carries up to ``RATING_SLOT_COUNT`` pairs of rating columns
(``rating_desc_1``/``rating_value_1`` … ``rating_desc_10``/``rating_value_10``).
This module only turns bytes into :class:`ImportRow` values; validation and
normalization live in :mod:`app.services.questionnaires.csv_importer`.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Mapping, Sequence

RATING_SLOT_COUNT = 10

QUESTION_HEADERS: tuple[str, ...] = (
    "section_title",
    "section_order",
    "step_title",
    "step_order",
    "question_title",
    "question_text",
    "question_context",
    "question_order",
)


def rating_desc_header(index: int) -> str:
    return f"rating_desc_{index}"


def rating_value_header(index: int) -> str:
    return f"rating_value_{index}"


REQUIRED_HEADERS: tuple[str, ...] = QUESTION_HEADERS + tuple(
    header
    for index in range(1, RATING_SLOT_COUNT + 1)
    for header in (rating_desc_header(index), rating_value_header(index))
)

FIRST_DATA_ROW = 2


class CsvParseError(Exception):
    """The upload cannot be read as CSV at all."""


@dataclass(frozen=True)
class RatingSlot:
    index: int
    description: str
    value: str

    @property
    def is_populated(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class ImportRow:
    row_number: int
    section_title: str
    section_order: str
    step_title: str
    step_order: str
    question_title: str
    question_text: str
    question_context: str
    question_order: str
    ratings: tuple[RatingSlot, ...]

    def populated_ratings(self) -> list[RatingSlot]:
        return [slot for slot in self.ratings if slot.is_populated]


@dataclass(frozen=True)
class CsvDocument:
    headers: list[str]
    rows: list[ImportRow]


def read_csv_document(content: bytes) -> CsvDocument:
    """Tokenize ``content`` and map every record to an :class:`ImportRow`.

    A leading byte-order mark is dropped, rows shorter than the header are
    padded with empty strings and surplus trailing cells are ignored.
    Records whose cells are all blank are skipped but still consume a row
    number, so numbers keep matching the position of the data row.
    """

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CsvParseError(f"file is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""), restval="", strict=True)
    try:
        fieldnames = reader.fieldnames
        if not fieldnames:
            raise CsvParseError("file has no header row")
        reader.fieldnames = [name.strip() for name in fieldnames]

        rows: list[ImportRow] = []
        for row_number, record in enumerate(reader, start=FIRST_DATA_ROW):
            if _is_record_blank(record):
                continue
            rows.append(to_import_row(record, row_number=row_number))
    except csv.Error as exc:
        raise CsvParseError(f"line {reader.line_num}: {exc}") from exc

    return CsvDocument(headers=list(reader.fieldnames), rows=rows)


def find_missing_headers(headers: Sequence[str]) -> list[str]:
    present = set(headers)
    return [header for header in REQUIRED_HEADERS if header not in present]


def to_import_row(record: Mapping[str, object], *, row_number: int) -> ImportRow:
    ratings = tuple(
        RatingSlot(
            index=index,
            description=_cell(record, rating_desc_header(index)),
            value=_cell(record, rating_value_header(index)),
        )
        for index in range(1, RATING_SLOT_COUNT + 1)
    )
    return ImportRow(
        row_number=row_number,
        section_title=_cell(record, "section_title"),
        section_order=_cell(record, "section_order"),
        step_title=_cell(record, "step_title"),
        step_order=_cell(record, "step_order"),
        question_title=_cell(record, "question_title"),
        question_text=_cell(record, "question_text"),
        question_context=_cell(record, "question_context"),
        question_order=_cell(record, "question_order"),
        ratings=ratings,
    )


def _cell(record: Mapping[str, object], header: str) -> str:
    value = record.get(header)
    if not isinstance(value, str):
        return ""
    return value.strip()


def _is_record_blank(record: Mapping[str, object]) -> bool:
    # Overflow cells are collected under the ``None`` key as a list.
    for key, value in record.items():
        if key is None:
            if any(isinstance(cell, str) and cell.strip() for cell in value or []):
                return False
        elif isinstance(value, str) and value.strip():
            return False
    return True


__all__ = [
    "CsvDocument",
    "CsvParseError",
    "FIRST_DATA_ROW",
    "ImportRow",
    "QUESTION_HEADERS",
    "RATING_SLOT_COUNT",
    "REQUIRED_HEADERS",
    "RatingSlot",
    "find_missing_headers",
    "rating_desc_header",
    "rating_value_header",
    "read_csv_document",
    "to_import_row",
]
