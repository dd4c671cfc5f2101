"""
Create questionnaire tables

Revision ID: 0002
Revises: 0001
Create Date: 2026-09-28
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIG_ID = sa.BigInteger().with_variant(mysql.BIGINT(unsigned=True), "mysql").with_variant(sa.Integer(), "sqlite")
TIMESTAMP = sa.DateTime().with_variant(mysql.DATETIME(fsp=3), "mysql")
TITLE = sa.String(length=255).with_variant(mysql.VARCHAR(length=255, collation="utf8mb4_bin"), "mysql")

MYSQL_TABLE_OPTIONS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_0900_ai_ci",
}


def _questionnaire_fk(table: str) -> sa.Column:
    return sa.Column(
        "questionnaire_id",
        BIG_ID,
        sa.ForeignKey("questionnaires.id", ondelete="CASCADE", name=f"fk_{table}_questionnaire"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "questionnaires",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("guidelines", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), server_default="draft", nullable=False),
        sa.Column("company_id", sa.String(length=64), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "created_by_admin_id",
            BIG_ID,
            sa.ForeignKey("admin_users.id", ondelete="RESTRICT", name="fk_questionnaires_created_by"),
            nullable=False,
        ),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaires"),
        **MYSQL_TABLE_OPTIONS,
    )
    op.create_index("idx_questionnaires_company", "questionnaires", ["company_id"], unique=False)
    op.create_index("idx_questionnaires_created_by", "questionnaires", ["created_by_admin_id"], unique=False)

    op.create_table(
        "questionnaire_sections",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        _questionnaire_fk("questionnaire_sections"),
        sa.Column("title", TITLE, nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("expanded", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaire_sections"),
        sa.UniqueConstraint("questionnaire_id", "title", name="uq_questionnaire_sections_title"),
        **MYSQL_TABLE_OPTIONS,
    )
    op.create_index(
        "idx_questionnaire_sections_order",
        "questionnaire_sections",
        ["questionnaire_id", "order_index"],
        unique=False,
    )

    op.create_table(
        "questionnaire_steps",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        _questionnaire_fk("questionnaire_steps"),
        sa.Column(
            "questionnaire_section_id",
            BIG_ID,
            sa.ForeignKey(
                "questionnaire_sections.id",
                ondelete="CASCADE",
                name="fk_questionnaire_steps_section",
            ),
            nullable=False,
        ),
        sa.Column("title", TITLE, nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("expanded", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaire_steps"),
        sa.UniqueConstraint("questionnaire_section_id", "title", name="uq_questionnaire_steps_title"),
        **MYSQL_TABLE_OPTIONS,
    )
    op.create_index(
        "idx_questionnaire_steps_order",
        "questionnaire_steps",
        ["questionnaire_id", "order_index"],
        unique=False,
    )

    op.create_table(
        "questionnaire_questions",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        _questionnaire_fk("questionnaire_questions"),
        sa.Column(
            "questionnaire_step_id",
            BIG_ID,
            sa.ForeignKey(
                "questionnaire_steps.id",
                ondelete="CASCADE",
                name="fk_questionnaire_questions_step",
            ),
            nullable=False,
        ),
        sa.Column("title", TITLE, nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaire_questions"),
        sa.UniqueConstraint("questionnaire_step_id", "title", name="uq_questionnaire_questions_title"),
        **MYSQL_TABLE_OPTIONS,
    )
    op.create_index(
        "idx_questionnaire_questions_order",
        "questionnaire_questions",
        ["questionnaire_id", "order_index"],
        unique=False,
    )

    op.create_table(
        "questionnaire_rating_scales",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        _questionnaire_fk("questionnaire_rating_scales"),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaire_rating_scales"),
        sa.UniqueConstraint("questionnaire_id", "value", name="uq_questionnaire_rating_scales_value"),
        **MYSQL_TABLE_OPTIONS,
    )

    op.create_table(
        "questionnaire_question_rating_scales",
        sa.Column("id", BIG_ID, autoincrement=True, nullable=False),
        _questionnaire_fk("questionnaire_question_rating_scales"),
        sa.Column(
            "questionnaire_question_id",
            BIG_ID,
            sa.ForeignKey(
                "questionnaire_questions.id",
                ondelete="CASCADE",
                name="fk_questionnaire_qrs_question",
            ),
            nullable=False,
        ),
        sa.Column(
            "questionnaire_rating_scale_id",
            BIG_ID,
            sa.ForeignKey(
                "questionnaire_rating_scales.id",
                ondelete="CASCADE",
                name="fk_questionnaire_qrs_rating_scale",
            ),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_questionnaire_question_rating_scales"),
        **MYSQL_TABLE_OPTIONS,
    )
    op.create_index(
        "idx_questionnaire_qrs_question",
        "questionnaire_question_rating_scales",
        ["questionnaire_question_id"],
        unique=False,
    )
    op.create_index(
        "idx_questionnaire_qrs_rating_scale",
        "questionnaire_question_rating_scales",
        ["questionnaire_rating_scale_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("questionnaire_question_rating_scales")
    op.drop_table("questionnaire_rating_scales")
    op.drop_table("questionnaire_questions")
    op.drop_table("questionnaire_steps")
    op.drop_table("questionnaire_sections")
    op.drop_table("questionnaires")
