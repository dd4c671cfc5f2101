"""Persist a normalized questionnaire graph.

Natural keys from the import are resolved to surrogate ids here, parents
first. The writer only flushes; the caller owns the transaction boundary
so a failed write can be rolled back as a whole.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from app.models.questionnaire import (
    Questionnaire,
    QuestionnaireQuestion,
    QuestionnaireQuestionRatingScale,
    QuestionnaireRatingScale,
    QuestionnaireSection,
    QuestionnaireStep,
)
from app.services.questionnaires.graph import (
    NormalizedQuestion,
    NormalizedRatingScale,
    NormalizedSection,
    NormalizedStep,
    QuestionRatingScaleAssociation,
    QuestionnaireGraph,
    QuestionnaireMetadata,
)


class GraphReferenceError(Exception):
    """The graph refers to an entity it does not contain."""


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value if value.strip() else None


class QuestionnaireGraphWriter:
    def __init__(self, db: Session) -> None:
        self._db = db

    def write(
        self,
        *,
        metadata: QuestionnaireMetadata,
        graph: QuestionnaireGraph,
        created_by_admin_id: int,
    ) -> Questionnaire:
        questionnaire = Questionnaire(
            name=metadata.name,
            description=_blank_to_none(metadata.description),
            guidelines=_blank_to_none(metadata.guidelines),
            company_id=_blank_to_none(metadata.company_id),
            status="draft",
            created_by_admin_id=created_by_admin_id,
        )
        self._db.add(questionnaire)
        self._db.flush()

        section_ids = self._write_sections(questionnaire.id, graph.sections)
        step_ids = self._write_steps(questionnaire.id, graph.steps, section_ids)
        question_ids = self._write_questions(questionnaire.id, graph.questions, step_ids)
        rating_scale_ids = self._write_rating_scales(questionnaire.id, graph.rating_scales)
        self._write_associations(
            questionnaire.id,
            graph.question_rating_scales,
            question_ids=question_ids,
            rating_scale_ids=rating_scale_ids,
        )
        return questionnaire

    def _write_sections(
        self,
        questionnaire_id: int,
        sections: Sequence[NormalizedSection],
    ) -> dict[str, int]:
        instances = {
            section.key: QuestionnaireSection(
                questionnaire_id=questionnaire_id,
                title=section.title,
                order_index=section.order_index,
            )
            for section in sections
        }
        self._db.add_all(instances.values())
        self._db.flush()
        return {key: instance.id for key, instance in instances.items()}

    def _write_steps(
        self,
        questionnaire_id: int,
        steps: Sequence[NormalizedStep],
        section_ids: dict[str, int],
    ) -> dict[str, int]:
        instances: dict[str, QuestionnaireStep] = {}
        for step in steps:
            section_id = section_ids.get(step.section_title)
            if section_id is None:
                raise GraphReferenceError(f"step {step.key!r} refers to an unknown section")
            instances[step.key] = QuestionnaireStep(
                questionnaire_id=questionnaire_id,
                questionnaire_section_id=section_id,
                title=step.title,
                order_index=step.order_index,
            )
        self._db.add_all(instances.values())
        self._db.flush()
        return {key: instance.id for key, instance in instances.items()}

    def _write_questions(
        self,
        questionnaire_id: int,
        questions: Sequence[NormalizedQuestion],
        step_ids: dict[str, int],
    ) -> dict[str, int]:
        instances: dict[str, QuestionnaireQuestion] = {}
        for question in questions:
            step_id = step_ids.get(question.parent_key)
            if step_id is None:
                raise GraphReferenceError(f"question {question.key!r} refers to an unknown step")
            instances[question.key] = QuestionnaireQuestion(
                questionnaire_id=questionnaire_id,
                questionnaire_step_id=step_id,
                title=question.title,
                question_text=question.question_text,
                context=question.context or None,
                order_index=question.order_index,
            )
        self._db.add_all(instances.values())
        self._db.flush()
        return {key: instance.id for key, instance in instances.items()}

    def _write_rating_scales(
        self,
        questionnaire_id: int,
        rating_scales: Sequence[NormalizedRatingScale],
    ) -> dict[int, int]:
        instances = {
            scale.value: QuestionnaireRatingScale(
                questionnaire_id=questionnaire_id,
                name=scale.name,
                description=scale.description,
                value=scale.value,
                order_index=scale.order_index,
            )
            for scale in rating_scales
        }
        self._db.add_all(instances.values())
        self._db.flush()
        return {value: instance.id for value, instance in instances.items()}

    def _write_associations(
        self,
        questionnaire_id: int,
        associations: Sequence[QuestionRatingScaleAssociation],
        *,
        question_ids: dict[str, int],
        rating_scale_ids: dict[int, int],
    ) -> None:
        for association in associations:
            question_id = question_ids.get(association.question_key)
            rating_scale_id = rating_scale_ids.get(association.value)
            if question_id is None or rating_scale_id is None:
                raise GraphReferenceError(
                    f"rating value {association.value} for {association.question_key!r} cannot be resolved"
                )
            self._db.add(
                QuestionnaireQuestionRatingScale(
                    questionnaire_id=questionnaire_id,
                    questionnaire_question_id=question_id,
                    questionnaire_rating_scale_id=rating_scale_id,
                    description=association.description,
                )
            )
        self._db.flush()


__all__ = ["GraphReferenceError", "QuestionnaireGraphWriter"]
