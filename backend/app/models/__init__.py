from .admin_user import AdminUser  # noqa: F401
from .questionnaire import (  # noqa: F401
    Questionnaire,
    QuestionnaireQuestion,
    QuestionnaireQuestionRatingScale,
    QuestionnaireRatingScale,
    QuestionnaireSection,
    QuestionnaireStep,
)

__all__ = [
    "AdminUser",
    "Questionnaire",
    "QuestionnaireQuestion",
    "QuestionnaireQuestionRatingScale",
    "QuestionnaireRatingScale",
    "QuestionnaireSection",
    "QuestionnaireStep",
]
