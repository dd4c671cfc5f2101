from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.errors import ErrorCode
from app.services.questionnaires.csv_importer import QuestionnaireCsvImporter
from app.services.questionnaires.import_rows import REQUIRED_HEADERS, read_csv_document
from app.services.questionnaires.template_exporter import TemplateExporter
from tests.utils.auth import auth_header
from tests.factories import AdminUserFactory

TEMPLATE_URL = "/admin/questionnaires/import/template"


def test_template_download_returns_csv_attachment(client: TestClient) -> None:
    admin = AdminUserFactory()

    response = client.get(TEMPLATE_URL, headers=auth_header(admin.id))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == (
        'attachment; filename="questionnaire_import_template.csv"'
    )
    header_line = response.content.decode("utf-8").splitlines()[0]
    assert header_line.split(",") == list(REQUIRED_HEADERS)


def test_template_requires_admin(client: TestClient) -> None:
    response = client.get(TEMPLATE_URL)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == ErrorCode.COMMON_UNAUTHENTICATED.value


def test_template_is_a_valid_import() -> None:
    content = TemplateExporter().build().content

    result = QuestionnaireCsvImporter().prepare(content)

    assert result.errors == []
    assert result.warnings == []
    assert result.graph is not None
    assert result.graph.summary() == {
        "sections": 2,
        "steps": 2,
        "questions": 3,
        "rating_scales": 5,
        "question_rating_scales": 15,
    }


def test_template_leaves_unused_rating_slots_empty() -> None:
    document = read_csv_document(TemplateExporter().build().content)

    for row in document.rows:
        assert [slot.value for slot in row.ratings[:5]] == ["5", "4", "3", "2", "1"]
        assert all(slot.value == "" and slot.description == "" for slot in row.ratings[5:])
