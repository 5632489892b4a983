"""Async repository for the question pool.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.  Saving is all-or-nothing: the FastAPI ``get_db``
dependency commits on success and rolls back on error, so a failed save
leaves the previous snapshot intact.

The repository converts between ORM rows and SDK ``Question`` models and
does not validate routing logic; that belongs in the SDK layer.  It *does*
reject snapshots the schema cannot hold (duplicate ids).
"""

import logging
from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from riskcheck_db.models.question import FollowUpRuleRow, QuestionRow
from riskcheck_rulesets.constants import ANSWER_TOKENS
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.models.question import Question

logger = logging.getLogger(__name__)


class QuestionRepository:
    """Async read/write operations on the ``questions`` and ``follow_up_rules`` tables."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def load_all(self, db: AsyncSession) -> list[Question]:
        """Return every question in pool order (``display_order``)."""
        stmt = (
            select(QuestionRow)
            .options(selectinload(QuestionRow.follow_ups))
            .order_by(QuestionRow.display_order, QuestionRow.id)
            # Rows saved earlier in this session may hold stale collections
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return [self._to_question(row) for row in result.scalars().all()]

    async def count(self, db: AsyncSession) -> int:
        """Number of questions in the pool."""
        result = await db.execute(select(func.count()).select_from(QuestionRow))
        return int(result.scalar_one())

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def save_all(self, db: AsyncSession, questions: Iterable[Question]) -> int:
        """Replace the stored pool with ``questions`` (delete + reinsert).

        Follow-up edges to ids outside the snapshot cannot be stored and are
        dropped with a warning.  Returns the number of saved questions.

        The caller must ``await db.commit()`` to persist.

        Raises:
            ValueError: if two questions share an id.
        """
        snapshot = QuestionGraph(questions).all()
        known = {q.id for q in snapshot}

        await db.execute(delete(FollowUpRuleRow))
        await db.execute(delete(QuestionRow))
        # Previously loaded rows would clash with the reinserted primary keys
        db.expunge_all()

        for order, q in enumerate(snapshot):
            db.add(QuestionRow(
                id=q.id,
                text=q.text,
                display_number=q.display_number,
                is_initial=q.is_initial,
                display_order=order,
                risk_points_yes=q.points_for("Yes"),
                risk_points_no=q.points_for("No"),
                risk_points_na=q.points_for("N/A"),
                control_type=q.control_type,
            ))
        # Edges reference question rows, so those must exist first
        await db.flush()

        for q in snapshot:
            for answer, target in q.follow_up.items():
                if target not in known:
                    logger.warning(
                        "Dropping follow-up %s --%s--> %s: target does not exist",
                        q.id, answer, target,
                    )
                    continue
                db.add(FollowUpRuleRow(
                    parent_question_id=q.id,
                    child_question_id=target,
                    trigger_answer=answer,
                ))
        await db.flush()

        logger.info("Saved question pool: %d questions", len(snapshot))
        return len(snapshot)

    async def reset(self, db: AsyncSession, defaults: Iterable[Question]) -> int:
        """Replace the stored pool with the default questions."""
        return await self.save_all(db, defaults)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _to_question(row: QuestionRow) -> Question:
        """Convert an ORM row (with loaded follow-ups) into a ``Question``."""
        follow_up = {rule.trigger_answer: rule.child_question_id for rule in row.follow_ups}
        return Question(
            id=row.id,
            text=row.text,
            display_number=row.display_number,
            is_initial=row.is_initial,
            control_type=row.control_type,
            risk_points={
                "Yes": row.risk_points_yes,
                "No": row.risk_points_no,
                "N/A": row.risk_points_na,
            },
            follow_up={t: follow_up[t] for t in ANSWER_TOKENS if t in follow_up},
        )
