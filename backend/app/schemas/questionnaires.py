from __future__ import annotations

from pydantic import BaseModel


class AdminImportQuestionnaireResponse(BaseModel):
    questionnaire_id: int
    name: str
    sections_imported: int
    steps_imported: int
    questions_imported: int
    rating_scales_imported: int
    question_rating_scales_imported: int
    warnings: list[str]
