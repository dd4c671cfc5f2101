from __future__ import annotations

from app.services.questionnaires.csv_importer import (
    QuestionnaireCsvImporter,
    build_import_result,
    parse_int,
    parse_positive_int,
    validate_rows,
)
from tests.utils.csv_rows import build_csv, import_rows, question_row


def test_valid_row_passes_without_errors() -> None:
    report = validate_rows(import_rows([question_row()]))

    assert report.errors == []
    assert report.warnings == []


def test_duplicate_question_reports_the_later_row() -> None:
    rows = import_rows([question_row(), question_row(text="Again?")])

    report = validate_rows(rows)

    assert report.errors == [
        'Row 3: Duplicate question found - section "Safety", step "Training", question "Q1"'
    ]


def test_same_question_title_in_another_step_is_not_a_duplicate() -> None:
    rows = import_rows([question_row(), question_row(step="Audits", step_order=2)])

    assert validate_rows(rows).errors == []


def test_non_numeric_order_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(question_order="abc")]))

    assert report.errors == ['Row 2: question_order must be a positive number (got: "abc")']


def test_zero_negative_and_fractional_orders_are_rejected() -> None:
    rows = import_rows(
        [question_row(section_order="0", step_order="-1", question_order="1.5")]
    )

    assert validate_rows(rows).errors == [
        'Row 2: section_order must be a positive number (got: "0")',
        'Row 2: step_order must be a positive number (got: "-1")',
        'Row 2: question_order must be a positive number (got: "1.5")',
    ]


def test_empty_order_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(step_order="")]))

    assert report.errors == ['Row 2: step_order must be a positive number (got: "")']


def test_duplicate_rating_value_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(ratings=[("Good", 5), ("Great", 5)])]))

    assert report.errors == ["Row 2: Duplicate rating_value 5 found in question"]


def test_duplicate_rating_value_is_reported_once_per_value() -> None:
    report = validate_rows(
        import_rows([question_row(ratings=[("a", 5), ("b", 5), ("c", 5), ("d", 1)])])
    )

    assert report.errors == ["Row 2: Duplicate rating_value 5 found in question"]


def test_row_without_ratings_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(ratings=[])]))

    assert report.errors == ["Row 2: At least one rating scale (rating_value_1) is required"]


def test_non_numeric_rating_value_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(ratings=[("Yes", "high")])]))

    assert report.errors == ['Row 2: rating_value_1 must be a number (got: "high")']


def test_rating_slots_need_not_be_contiguous() -> None:
    record = question_row(ratings=[])
    record["rating_desc_4"] = "Sometimes"
    record["rating_value_4"] = "3"

    report = validate_rows(import_rows([record]))

    assert report.errors == []


def test_description_without_value_is_a_warning() -> None:
    record = question_row()
    record["rating_desc_3"] = "Orphan"

    report = validate_rows(import_rows([record]))

    assert report.errors == []
    assert report.warnings == ["Row 2: rating_desc_3 ignored because rating_value_3 is empty"]


def test_missing_required_text_fields_are_each_reported() -> None:
    report = validate_rows(import_rows([question_row(section="", text="")]))

    assert report.errors == [
        "Row 2: section_title is required",
        "Row 2: question_text is required",
    ]


def test_all_violations_are_collected_in_row_order() -> None:
    rows = import_rows(
        [
            question_row(question_order="abc"),
            question_row(question="Q2", ratings=[]),
            question_row(question="Q3", ratings=[("a", 2), ("b", 2)]),
        ]
    )

    assert validate_rows(rows).errors == [
        'Row 2: question_order must be a positive number (got: "abc")',
        "Row 3: At least one rating scale (rating_value_1) is required",
        "Row 4: Duplicate rating_value 2 found in question",
    ]


def test_invalid_sheet_produces_no_graph() -> None:
    content = build_csv([question_row(), question_row()])

    result = QuestionnaireCsvImporter().prepare(content)

    assert result.graph is None
    assert not result.ok
    assert len(result.errors) == 1


def test_parse_int_accepts_signed_integers_only() -> None:
    assert parse_int("42") == 42
    assert parse_int("-3") == -3
    assert parse_int("+7") == 7
    assert parse_int("1.0") is None
    assert parse_int("") is None
    assert parse_int("1e3") is None


def test_parse_positive_int() -> None:
    assert parse_positive_int("1") == 1
    assert parse_positive_int("0") is None
    assert parse_positive_int("-5") is None


def test_titles_that_would_share_a_natural_key_are_rejected() -> None:
    rows = import_rows(
        [
            question_row(section="A|B", step="C", question="Q1"),
            question_row(section="A", step="B|C", question="Q1"),
        ]
    )

    result = build_import_result(rows)

    assert result.graph is None
    assert result.errors == [
        'Row 2: section_title must not contain "|"',
        'Row 3: step_title must not contain "|"',
        'Row 3: Duplicate question found - section "A", step "B|C", question "Q1"',
    ]


def test_separator_in_question_title_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(question="Q1|Q2")]))

    assert report.errors == ['Row 2: question_title must not contain "|"']


def test_overlong_titles_are_rejected() -> None:
    report = validate_rows(import_rows([question_row(section="S" * 256, question="Q" * 255)]))

    assert report.errors == ["Row 2: section_title must be at most 255 characters"]


def test_title_length_counts_characters_not_bytes() -> None:
    report = validate_rows(import_rows([question_row(step="é" * 255)]))

    assert report.errors == []


def test_oversized_question_text_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(text="x" * 65536, context="é" * 32768)]))

    assert report.errors == [
        "Row 2: question_text must be at most 65535 bytes",
        "Row 2: question_context must be at most 65535 bytes",
    ]


def test_rating_value_outside_integer_column_range_is_rejected() -> None:
    rows = import_rows(
        [
            question_row(ratings=[("Huge", "99999999999999999999"), ("Yes", 1)]),
            question_row(question="Q2", ratings=[("Max", 2147483647), ("Min", -2147483648)]),
            question_row(question="Q3", ratings=[("Below", "-2147483649")]),
        ]
    )

    assert validate_rows(rows).errors == [
        'Row 2: rating_value_1 must be between -2147483648 and 2147483647 (got: "99999999999999999999")',
        'Row 4: rating_value_1 must be between -2147483648 and 2147483647 (got: "-2147483649")',
    ]


def test_order_outside_integer_column_range_is_rejected() -> None:
    report = validate_rows(import_rows([question_row(section_order="2147483648")]))

    assert report.errors == ['Row 2: section_order must be at most 2147483647 (got: "2147483648")']


def test_titles_differing_only_in_case_are_distinct_questions() -> None:
    rows = import_rows([question_row(question="Q1"), question_row(question="q1")])

    result = build_import_result(rows)

    assert result.errors == []
    assert result.graph is not None
    assert [question.title for question in result.graph.questions] == ["Q1", "q1"]
