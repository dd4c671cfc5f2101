from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy.orm import Session

from app.core.errors import ErrorCode
from app.db.base import INT_MAX, INT_MIN, TEXT_MAX_BYTES, TITLE_MAX_LENGTH
from app.services.questionnaires.graph import (
    KEY_SEPARATOR,
    NormalizedQuestion,
    NormalizedRatingScale,
    NormalizedSection,
    NormalizedStep,
    OrderedKeyMap,
    QuestionRatingScaleAssociation,
    QuestionnaireGraph,
    QuestionnaireMetadata,
    question_key,
    step_key,
)
from app.services.questionnaires.graph_writer import QuestionnaireGraphWriter
from app.services.questionnaires.import_rows import (
    CsvParseError,
    ImportRow,
    find_missing_headers,
    rating_desc_header,
    rating_value_header,
    read_csv_document,
)

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("section_title", "step_title", "question_title", "question_text")
TITLE_FIELDS = ("section_title", "step_title", "question_title")
LONG_TEXT_FIELDS = ("question_text", "question_context")
ORDER_FIELDS = ("section_order", "step_order", "question_order")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class QuestionnaireImportError(Exception):
    def __init__(
        self,
        *,
        error_code: ErrorCode,
        detail: str | None = None,
        errors: Sequence[str] | None = None,
        missing_headers: Sequence[str] | None = None,
    ) -> None:
        super().__init__(detail or error_code.value)
        self.error_code = error_code
        self.detail = detail
        self.errors = list(errors or [])
        self.missing_headers = list(missing_headers or [])


@dataclass(frozen=True)
class RowValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class NormalizedMaps:
    sections: OrderedKeyMap[str, NormalizedSection] = field(default_factory=OrderedKeyMap)
    steps: OrderedKeyMap[str, NormalizedStep] = field(default_factory=OrderedKeyMap)
    questions: OrderedKeyMap[str, NormalizedQuestion] = field(default_factory=OrderedKeyMap)
    rating_scales: OrderedKeyMap[int, NormalizedRatingScale] = field(default_factory=OrderedKeyMap)
    associations: list[QuestionRatingScaleAssociation] = field(default_factory=list)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of validating and normalizing one sheet.

    ``graph`` is only set when ``errors`` is empty.
    """

    graph: QuestionnaireGraph | None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class QuestionnaireImportSummary:
    questionnaire_id: int
    name: str
    sections_imported: int
    steps_imported: int
    questions_imported: int
    rating_scales_imported: int
    question_rating_scales_imported: int
    warnings: list[str]


# ----------------------------------------------------------------------#
# Value parsing
# ----------------------------------------------------------------------#


def parse_int(raw: str) -> int | None:
    if not _INTEGER_PATTERN.fullmatch(raw):
        return None
    return int(raw)


def parse_positive_int(raw: str) -> int | None:
    value = parse_int(raw)
    if value is None or value < 1:
        return None
    return value


def parse_order(raw: str) -> int:
    value = parse_int(raw)
    return 0 if value is None else value


# ----------------------------------------------------------------------#
# Row validation
# ----------------------------------------------------------------------#


def _text_errors(prefix: str, row: ImportRow) -> list[str]:
    errors: list[str] = []
    for field_name in TITLE_FIELDS:
        value = getattr(row, field_name)
        if len(value) > TITLE_MAX_LENGTH:
            errors.append(f"{prefix}{field_name} must be at most {TITLE_MAX_LENGTH} characters")
        if KEY_SEPARATOR in value:
            errors.append(f'{prefix}{field_name} must not contain "{KEY_SEPARATOR}"')
    for field_name in LONG_TEXT_FIELDS:
        if len(getattr(row, field_name).encode("utf-8")) > TEXT_MAX_BYTES:
            errors.append(f"{prefix}{field_name} must be at most {TEXT_MAX_BYTES} bytes")
    return errors


def validate_rows(rows: Sequence[ImportRow]) -> RowValidationReport:
    """Check every row and collect all violations instead of stopping at the first.

    Besides the sheet rules, values must fit the columns they are stored in,
    so that a sheet accepted here cannot fail later on insert.
    """

    errors: list[str] = []
    warnings: list[str] = []
    seen_questions: set[str] = set()

    for row in rows:
        prefix = f"Row {row.row_number}: "

        for field_name in REQUIRED_TEXT_FIELDS:
            if not getattr(row, field_name):
                errors.append(f"{prefix}{field_name} is required")
        errors.extend(_text_errors(prefix, row))

        for field_name in ORDER_FIELDS:
            raw = getattr(row, field_name)
            order = parse_positive_int(raw)
            if order is None:
                errors.append(f'{prefix}{field_name} must be a positive number (got: "{raw}")')
            elif order > INT_MAX:
                errors.append(f'{prefix}{field_name} must be at most {INT_MAX} (got: "{raw}")')

        # Same identity the normalizer deduplicates on.
        if row.section_title and row.step_title and row.question_title:
            identity = question_key(row.section_title, row.step_title, row.question_title)
            if identity in seen_questions:
                errors.append(
                    f'{prefix}Duplicate question found - section "{row.section_title}", '
                    f'step "{row.step_title}", question "{row.question_title}"'
                )
            seen_questions.add(identity)

        seen_values: set[int] = set()
        reported_values: set[int] = set()
        populated = 0
        for slot in row.ratings:
            if not slot.is_populated:
                if slot.description:
                    warnings.append(
                        f"{prefix}{rating_desc_header(slot.index)} ignored because "
                        f"{rating_value_header(slot.index)} is empty"
                    )
                continue
            populated += 1
            if len(slot.description.encode("utf-8")) > TEXT_MAX_BYTES:
                errors.append(f"{prefix}{rating_desc_header(slot.index)} must be at most {TEXT_MAX_BYTES} bytes")
            value = parse_int(slot.value)
            if value is None:
                errors.append(f'{prefix}{rating_value_header(slot.index)} must be a number (got: "{slot.value}")')
                continue
            if not INT_MIN <= value <= INT_MAX:
                errors.append(
                    f"{prefix}{rating_value_header(slot.index)} must be between {INT_MIN} and {INT_MAX} "
                    f'(got: "{slot.value}")'
                )
                continue
            if value in seen_values and value not in reported_values:
                errors.append(f"{prefix}Duplicate rating_value {value} found in question")
                reported_values.add(value)
            seen_values.add(value)

        if populated == 0:
            errors.append(f"{prefix}At least one rating scale ({rating_value_header(1)}) is required")

    return RowValidationReport(errors=errors, warnings=warnings)


# ----------------------------------------------------------------------#
# Normalization & assembly
# ----------------------------------------------------------------------#


def normalize_rows(rows: Sequence[ImportRow]) -> NormalizedMaps:
    """Deduplicate entities by natural key; the first row introducing a key wins."""

    maps = NormalizedMaps()
    for row in rows:
        maps.sections.insert_if_absent(
            row.section_title,
            lambda row=row: NormalizedSection(title=row.section_title, order_index=parse_order(row.section_order)),
        )
        maps.steps.insert_if_absent(
            step_key(row.section_title, row.step_title),
            lambda row=row: NormalizedStep(
                section_title=row.section_title,
                title=row.step_title,
                order_index=parse_order(row.step_order),
            ),
        )
        key = question_key(row.section_title, row.step_title, row.question_title)
        maps.questions.insert_if_absent(
            key,
            lambda row=row: NormalizedQuestion(
                section_title=row.section_title,
                step_title=row.step_title,
                title=row.question_title,
                question_text=row.question_text,
                context=row.question_context,
                order_index=parse_order(row.question_order),
            ),
        )

        for slot in row.populated_ratings():
            value = parse_int(slot.value)
            if value is None:
                continue
            maps.rating_scales.insert_if_absent(
                value,
                lambda value=value: NormalizedRatingScale(
                    value=value,
                    name=f"Level {value}",
                    description=f"Imported scale level {value}",
                ),
            )
            maps.associations.append(
                QuestionRatingScaleAssociation(question_key=key, value=value, description=slot.description)
            )
    return maps


def assemble_graph(maps: NormalizedMaps) -> QuestionnaireGraph:
    rating_scales = [
        NormalizedRatingScale(
            value=scale.value,
            name=scale.name,
            description=scale.description,
            order_index=position,
        )
        for position, scale in enumerate(maps.rating_scales.values())
    ]
    return QuestionnaireGraph(
        sections=maps.sections.values(),
        steps=maps.steps.values(),
        questions=maps.questions.values(),
        rating_scales=rating_scales,
        question_rating_scales=list(maps.associations),
    )


def build_import_result(rows: Sequence[ImportRow]) -> ImportResult:
    report = validate_rows(rows)
    if report.errors:
        return ImportResult(graph=None, errors=report.errors, warnings=report.warnings)
    graph = assemble_graph(normalize_rows(rows))
    return ImportResult(graph=graph, warnings=report.warnings)


# ----------------------------------------------------------------------#
# Orchestration
# ----------------------------------------------------------------------#


class QuestionnaireCsvImporter:
    """Import questionnaires from the flat CSV template."""

    def __init__(self, db: Session | None = None) -> None:
        self._db = db

    def prepare(self, content: bytes) -> ImportResult:
        """Parse and validate ``content`` without touching the database."""
        rows = self._parse(content)
        return build_import_result(rows)

    def import_questionnaire(
        self,
        *,
        metadata: QuestionnaireMetadata,
        admin_id: int,
        content: bytes,
    ) -> QuestionnaireImportSummary:
        result = self.prepare(content)
        if result.errors or result.graph is None:
            raise QuestionnaireImportError(
                error_code=ErrorCode.QUESTIONNAIRES_IMPORT_VALIDATION,
                detail="CSV validation failed",
                errors=result.errors,
            )

        if self._db is None:
            raise RuntimeError("A database session is required to persist an import")

        questionnaire = QuestionnaireGraphWriter(self._db).write(
            metadata=metadata,
            graph=result.graph,
            created_by_admin_id=admin_id,
        )
        counts = result.graph.summary()
        logger.info(
            "Imported questionnaire id=%s name=%r counts=%s warnings=%d",
            questionnaire.id,
            questionnaire.name,
            counts,
            len(result.warnings),
        )
        return QuestionnaireImportSummary(
            questionnaire_id=questionnaire.id,
            name=questionnaire.name,
            sections_imported=counts["sections"],
            steps_imported=counts["steps"],
            questions_imported=counts["questions"],
            rating_scales_imported=counts["rating_scales"],
            question_rating_scales_imported=counts["question_rating_scales"],
            warnings=list(result.warnings),
        )

    def _parse(self, content: bytes) -> list[ImportRow]:
        try:
            document = read_csv_document(content)
        except CsvParseError as exc:
            raise QuestionnaireImportError(
                error_code=ErrorCode.QUESTIONNAIRES_IMPORT_PARSE_FAILED,
                detail=f"Failed to parse CSV: {exc}",
            ) from exc

        missing = find_missing_headers(document.headers)
        if missing:
            raise QuestionnaireImportError(
                error_code=ErrorCode.QUESTIONNAIRES_IMPORT_HEADERS_MISSING,
                detail=f"Missing required headers: {', '.join(missing)}",
                missing_headers=missing,
            )
        return document.rows


__all__ = [
    "ImportResult",
    "NormalizedMaps",
    "QuestionnaireCsvImporter",
    "QuestionnaireImportError",
    "QuestionnaireImportSummary",
    "QuestionnaireMetadata",
    "RowValidationReport",
    "assemble_graph",
    "build_import_result",
    "normalize_rows",
    "parse_int",
    "parse_order",
    "parse_positive_int",
    "validate_rows",
]
