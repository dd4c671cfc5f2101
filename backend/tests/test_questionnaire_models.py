from __future__ import annotations

import pytest
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from app.core.errors import ErrorCode
from app.models.questionnaire import QuestionnaireQuestion, QuestionnaireSection, QuestionnaireStep


@pytest.mark.parametrize("model", [QuestionnaireSection, QuestionnaireStep, QuestionnaireQuestion])
def test_title_columns_use_binary_collation_on_mysql(model) -> None:
    ddl = str(CreateTable(model.__table__).compile(dialect=mysql.dialect()))

    assert "title VARCHAR(255) COLLATE utf8mb4_bin NOT NULL" in ddl


def test_title_columns_are_plain_varchar_on_sqlite() -> None:
    ddl = str(CreateTable(QuestionnaireSection.__table__).compile(dialect=sqlite.dialect()))

    assert "title VARCHAR(255) NOT NULL" in ddl


def test_import_error_statuses() -> None:
    assert ErrorCode.QUESTIONNAIRES_IMPORT_FILE_TOO_LARGE.http_status == 413
    assert ErrorCode.QUESTIONNAIRES_IMPORT_VALIDATION.http_status == 422
    assert ErrorCode.COMMON_VALIDATION_ERROR.http_status == 422
