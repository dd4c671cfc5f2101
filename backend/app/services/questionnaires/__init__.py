"""Questionnaire import service helpers."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ImportResult": (
        "app.services.questionnaires.csv_importer",
        "ImportResult",
    ),
    "QuestionnaireCsvImporter": (
        "app.services.questionnaires.csv_importer",
        "QuestionnaireCsvImporter",
    ),
    "QuestionnaireImportError": (
        "app.services.questionnaires.csv_importer",
        "QuestionnaireImportError",
    ),
    "QuestionnaireImportSummary": (
        "app.services.questionnaires.csv_importer",
        "QuestionnaireImportSummary",
    ),
    "build_import_result": (
        "app.services.questionnaires.csv_importer",
        "build_import_result",
    ),
    "QuestionnaireGraph": (
        "app.services.questionnaires.graph",
        "QuestionnaireGraph",
    ),
    "QuestionnaireMetadata": (
        "app.services.questionnaires.graph",
        "QuestionnaireMetadata",
    ),
    "QuestionnaireGraphWriter": (
        "app.services.questionnaires.graph_writer",
        "QuestionnaireGraphWriter",
    ),
    "REQUIRED_HEADERS": (
        "app.services.questionnaires.import_rows",
        "REQUIRED_HEADERS",
    ),
    "read_csv_document": (
        "app.services.questionnaires.import_rows",
        "read_csv_document",
    ),
    "TemplateExporter": (
        "app.services.questionnaires.template_exporter",
        "TemplateExporter",
    ),
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> Any:
    try:
        module_path, attribute = _LAZY_IMPORTS[name]
    except KeyError as exc:  # pragma: no cover
        raise AttributeError(name) from exc

    module = import_module(module_path)
    value = getattr(module, attribute)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - simple proxy
    return list(__all__)
