"""riskcheck_db — relational persistence for the question pool.

This package provides the ORM models, async engine factory, and repository
for loading and saving the full question snapshot.  It is designed to be
consumed by the FastAPI server; the SDK never imports it.
"""

from riskcheck_db.engine import dispose_engine, get_engine, get_session_factory
from riskcheck_db.models.question import FollowUpRuleRow, QuestionRow
from riskcheck_db.repository import QuestionRepository

__all__ = [
    "QuestionRow",
    "FollowUpRuleRow",
    "get_engine",
    "get_session_factory",
    "dispose_engine",
    "QuestionRepository",
]
