"""Create questions and follow_up_rules tables.

Initial schema for the flat question pool: one row per question, one row
per follow-up edge (unique per parent and trigger answer, cascading on
delete of either end).

Revision ID: 20261012_questions
Revises:
Create Date: 2026-10-12
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261012_questions"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer, nullable=False, autoincrement=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column(
            "display_number",
            sa.String(64),
            nullable=False,
            server_default=sa.text("''"),
        ),
        sa.Column(
            "is_initial",
            sa.Boolean,
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("display_order", sa.Integer, nullable=False),
        # Scoring
        sa.Column("risk_points_yes", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("risk_points_no", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("risk_points_na", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column(
            "control_type",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'binary3'"),
        ),
        sa.CheckConstraint(
            "risk_points_yes >= 0 AND risk_points_no >= 0 AND risk_points_na >= 0",
            name=op.f("ck_questions_risk_points_non_negative"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_questions")),
    )
    op.create_index(op.f("ix_questions_display_order"), "questions", ["display_order"])

    op.create_table(
        "follow_up_rules",
        sa.Column("id", sa.Integer, nullable=False, autoincrement=True),
        sa.Column("parent_question_id", sa.Integer, nullable=False),
        sa.Column("child_question_id", sa.Integer, nullable=False),
        sa.Column("trigger_answer", sa.String(8), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_follow_up_rules")),
        sa.ForeignKeyConstraint(
            ["parent_question_id"],
            ["questions.id"],
            name=op.f("fk_follow_up_rules_parent_question_id_questions"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["child_question_id"],
            ["questions.id"],
            name=op.f("fk_follow_up_rules_child_question_id_questions"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "parent_question_id",
            "trigger_answer",
            name=op.f("uq_follow_up_rules_parent_question_id"),
        ),
        sa.CheckConstraint(
            "trigger_answer IN ('Yes', 'No', 'N/A')",
            name=op.f("ck_follow_up_rules_trigger_answer_token"),
        ),
    )


def downgrade() -> None:
    op.drop_table("follow_up_rules")
    op.drop_index(op.f("ix_questions_display_order"), table_name="questions")
    op.drop_table("questions")
