from __future__ import annotations

import logging
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ErrorCode
from app.core.exceptions import BaseAppException, raise_app_error
from app.deps import admin as admin_deps
from app.models.admin_user import AdminUser
from app.schemas.questionnaires import AdminImportQuestionnaireResponse
from app.services.questionnaires.csv_importer import (
    QuestionnaireCsvImporter,
    QuestionnaireImportError,
)
from app.services.questionnaires.graph import QuestionnaireMetadata
from app.services.questionnaires.template_exporter import TemplateExporter


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/questionnaires", tags=["admin_questionnaires"])

_CSV_MEDIA_TYPES = {"text/csv"}
_CSV_SUFFIX = ".csv"
_NAME_MAX_LENGTH = 255


def _is_csv_upload(file: UploadFile) -> bool:
    media_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if media_type in _CSV_MEDIA_TYPES:
        return True
    return (file.filename or "").lower().endswith(_CSV_SUFFIX)


def _resolve_name(raw: str | None, filename: str | None) -> str:
    name = (raw or "").strip()
    if not name and filename:
        path = PurePath(filename)
        name = (path.stem if path.suffix.lower() == _CSV_SUFFIX else path.name).strip()
    if not name or len(name) > _NAME_MAX_LENGTH:
        raise_app_error(ErrorCode.QUESTIONNAIRES_IMPORT_NAME_INVALID)
    return name


@router.get("/import/template")
def download_import_template(
    _: AdminUser = Depends(admin_deps.get_current_admin),
) -> Response:
    result = TemplateExporter().build()
    return Response(
        content=result.content,
        media_type=TemplateExporter.FILE_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.post(
    "/import",
    response_model=AdminImportQuestionnaireResponse,
    status_code=status.HTTP_201_CREATED,
)
async def import_questionnaire(
    file: UploadFile | None = File(default=None),
    name: str | None = Form(default=None),
    description: str | None = Form(default=None),
    guidelines: str | None = Form(default=None),
    company_id: str | None = Form(default=None),
    admin: AdminUser = Depends(admin_deps.get_current_admin),
    db: Session = Depends(admin_deps.get_db),
) -> AdminImportQuestionnaireResponse:
    if file is None:
        raise_app_error(ErrorCode.QUESTIONNAIRES_IMPORT_FILE_MISSING)
    if not _is_csv_upload(file):
        raise_app_error(
            ErrorCode.QUESTIONNAIRES_IMPORT_UNSUPPORTED_TYPE,
            detail="Only CSV files are supported",
        )

    content = await file.read()
    if not content:
        raise_app_error(ErrorCode.QUESTIONNAIRES_IMPORT_FILE_MISSING, detail="The uploaded file is empty")
    if len(content) > settings.questionnaire_import_max_bytes:
        raise_app_error(
            ErrorCode.QUESTIONNAIRES_IMPORT_FILE_TOO_LARGE,
            detail=f"Files up to {settings.questionnaire_import_max_bytes} bytes are accepted",
        )

    metadata = QuestionnaireMetadata(
        name=_resolve_name(name, file.filename),
        description=description,
        guidelines=guidelines,
        company_id=company_id,
    )

    importer = QuestionnaireCsvImporter(db)
    nested_tx = db.begin_nested()
    try:
        summary = importer.import_questionnaire(
            metadata=metadata,
            admin_id=admin.id,
            content=content,
        )
        nested_tx.commit()
        db.commit()
    except QuestionnaireImportError as exc:
        if nested_tx.is_active:
            nested_tx.rollback()
        logger.info(
            "Questionnaire import rejected: code=%s errors=%d",
            exc.error_code.value,
            len(exc.errors),
        )
        extra: dict[str, list[str]] = {}
        if exc.missing_headers:
            extra["missing_headers"] = exc.missing_headers
        if exc.errors:
            extra["errors"] = exc.errors
        raise_app_error(exc.error_code, detail=exc.detail, extra=extra or None)
    except BaseAppException:
        if nested_tx.is_active:
            nested_tx.rollback()
        raise
    except Exception:
        if nested_tx.is_active:
            nested_tx.rollback()
        db.rollback()
        logger.exception("Failed to persist imported questionnaire name=%r", metadata.name)
        raise_app_error(ErrorCode.QUESTIONNAIRES_IMPORT_PERSIST_FAILED)

    return AdminImportQuestionnaireResponse(
        questionnaire_id=summary.questionnaire_id,
        name=summary.name,
        sections_imported=summary.sections_imported,
        steps_imported=summary.steps_imported,
        questions_imported=summary.questions_imported,
        rating_scales_imported=summary.rating_scales_imported,
        question_rating_scales_imported=summary.question_rating_scales_imported,
        warnings=summary.warnings,
    )
