"""Shorthand builders for questions and small hand-made pools."""

from riskcheck_rulesets.models.question import Question


def binary(qid, *, yes=0, no=0, na=0, follow_up=None, initial=False, control_type="binary3", text=None):
    """Build a binary question with risk points and follow-ups."""
    return Question(
        id=qid,
        text=text or f"Question {qid}?",
        is_initial=initial,
        control_type=control_type,
        risk_points={"Yes": yes, "No": no, "N/A": na},
        follow_up=follow_up or {},
    )


def plain(qid, control_type="free_text", *, initial=False, text=None):
    """Build a non-binary question (answer recorded only)."""
    return Question(
        id=qid,
        text=text or f"Question {qid}?",
        is_initial=initial,
        control_type=control_type,
    )


def numbers(questions):
    """Map id -> display_number for a renumbered snapshot."""
    return {q.id: q.display_number for q in questions}
