"""ORM models for riskcheck_db."""

from riskcheck_db.models.base import Base
from riskcheck_db.models.question import FollowUpRuleRow, QuestionRow

__all__ = ["Base", "QuestionRow", "FollowUpRuleRow"]
