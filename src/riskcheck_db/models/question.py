"""Question pool ORM models.

The pool is stored flat: one row per question plus one row per follow-up
edge.  ``display_order`` is the pool order (initial queue order and
renumbering tie-break); ``display_number`` is a cached derived label and is
never used for lookup.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    false,
)
# Aliased: QuestionRow has a column named ``text``
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from riskcheck_db.models.base import Base


class QuestionRow(Base):
    """One row per question in the pool."""

    __tablename__ = "questions"

    # Stable id assigned by the editor, not autoincremented
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    display_number: Mapped[str] = mapped_column(
        String(64), nullable=False, default="", server_default=sql_text("''")
    )
    is_initial: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # --- Scoring (binary control types only) ---
    risk_points_yes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )
    risk_points_no: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )
    risk_points_na: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )

    control_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="binary3", server_default=sql_text("'binary3'")
    )

    # Read side only; edges are written as rows by the repository
    follow_ups: Mapped[list["FollowUpRuleRow"]] = relationship(
        foreign_keys="FollowUpRuleRow.parent_question_id",
        order_by="FollowUpRuleRow.id",
        viewonly=True,
    )

    __table_args__ = (
        CheckConstraint(
            "risk_points_yes >= 0 AND risk_points_no >= 0 AND risk_points_na >= 0",
            name="risk_points_non_negative",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<QuestionRow(id={self.id}, order={self.display_order}, "
            f"type={self.control_type!r})>"
        )


class FollowUpRuleRow(Base):
    """One follow-up edge: answering ``parent`` with ``trigger_answer`` queues ``child``.

    Deleting either end removes the edge.
    """

    __tablename__ = "follow_up_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    child_question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    trigger_answer: Mapped[str] = mapped_column(String(8), nullable=False)

    __table_args__ = (
        # At most one follow-up per answer token
        UniqueConstraint("parent_question_id", "trigger_answer"),
        CheckConstraint(
            "trigger_answer IN ('Yes', 'No', 'N/A')",
            name="trigger_answer_token",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<FollowUpRuleRow({self.parent_question_id} --{self.trigger_answer}--> "
            f"{self.child_question_id})>"
        )
