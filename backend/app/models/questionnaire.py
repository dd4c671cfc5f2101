from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, BigId, Timestamp, Title

if TYPE_CHECKING:  # pragma: no cover
    from app.models.admin_user import AdminUser


def utcnow() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class Questionnaire(Base):
    __tablename__ = "questionnaires"
    __table_args__ = (
        Index("idx_questionnaires_company", "company_id"),
        Index("idx_questionnaires_created_by", "created_by_admin_id"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    guidelines: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="draft", server_default="draft")
    company_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    created_by_admin_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("admin_users.id", ondelete="RESTRICT"),
    )
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow, onupdate=utcnow)

    created_by_admin: Mapped[AdminUser] = relationship("AdminUser")
    sections: Mapped[list[QuestionnaireSection]] = relationship(
        "QuestionnaireSection",
        back_populates="questionnaire",
        order_by="QuestionnaireSection.order_index",
    )
    rating_scales: Mapped[list[QuestionnaireRatingScale]] = relationship(
        "QuestionnaireRatingScale",
        back_populates="questionnaire",
        order_by="QuestionnaireRatingScale.order_index",
    )


class QuestionnaireSection(Base):
    __tablename__ = "questionnaire_sections"
    __table_args__ = (
        UniqueConstraint("questionnaire_id", "title", name="uq_questionnaire_sections_title"),
        Index("idx_questionnaire_sections_order", "questionnaire_id", "order_index"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    questionnaire_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(Title)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    expanded: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)

    questionnaire: Mapped[Questionnaire] = relationship("Questionnaire", back_populates="sections")
    steps: Mapped[list[QuestionnaireStep]] = relationship(
        "QuestionnaireStep",
        back_populates="section",
        order_by="QuestionnaireStep.order_index",
    )


class QuestionnaireStep(Base):
    __tablename__ = "questionnaire_steps"
    __table_args__ = (
        UniqueConstraint("questionnaire_section_id", "title", name="uq_questionnaire_steps_title"),
        Index("idx_questionnaire_steps_order", "questionnaire_id", "order_index"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    questionnaire_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
    )
    questionnaire_section_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaire_sections.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(Title)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    expanded: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)

    section: Mapped[QuestionnaireSection] = relationship("QuestionnaireSection", back_populates="steps")
    questions: Mapped[list[QuestionnaireQuestion]] = relationship(
        "QuestionnaireQuestion",
        back_populates="step",
        order_by="QuestionnaireQuestion.order_index",
    )


class QuestionnaireQuestion(Base):
    __tablename__ = "questionnaire_questions"
    __table_args__ = (
        UniqueConstraint("questionnaire_step_id", "title", name="uq_questionnaire_questions_title"),
        Index("idx_questionnaire_questions_order", "questionnaire_id", "order_index"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    questionnaire_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
    )
    questionnaire_step_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaire_steps.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(Title)
    question_text: Mapped[str] = mapped_column(Text)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)

    step: Mapped[QuestionnaireStep] = relationship("QuestionnaireStep", back_populates="questions")
    rating_scale_links: Mapped[list[QuestionnaireQuestionRatingScale]] = relationship(
        "QuestionnaireQuestionRatingScale",
        back_populates="question",
    )


class QuestionnaireRatingScale(Base):
    __tablename__ = "questionnaire_rating_scales"
    __table_args__ = (
        UniqueConstraint("questionnaire_id", "value", name="uq_questionnaire_rating_scales_value"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    questionnaire_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
    )
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[int] = mapped_column(Integer)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)

    questionnaire: Mapped[Questionnaire] = relationship("Questionnaire", back_populates="rating_scales")


class QuestionnaireQuestionRatingScale(Base):
    __tablename__ = "questionnaire_question_rating_scales"
    __table_args__ = (
        Index("idx_questionnaire_qrs_question", "questionnaire_question_id"),
        Index("idx_questionnaire_qrs_rating_scale", "questionnaire_rating_scale_id"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    questionnaire_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
    )
    questionnaire_question_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaire_questions.id", ondelete="CASCADE"),
    )
    questionnaire_rating_scale_id: Mapped[int] = mapped_column(
        BigId,
        ForeignKey("questionnaire_rating_scales.id", ondelete="CASCADE"),
    )
    description: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)

    question: Mapped[QuestionnaireQuestion] = relationship(
        "QuestionnaireQuestion", back_populates="rating_scale_links"
    )
    rating_scale: Mapped[QuestionnaireRatingScale] = relationship("QuestionnaireRatingScale")


__all__ = [
    "Questionnaire",
    "QuestionnaireQuestion",
    "QuestionnaireQuestionRatingScale",
    "QuestionnaireRatingScale",
    "QuestionnaireSection",
    "QuestionnaireStep",
    "utcnow",
]
