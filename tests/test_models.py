"""Question model and QuestionGraph tests."""

import pytest
from pydantic import ValidationError

from helpers.factories import binary, plain

from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.models.question import Question


# =====================================================================
# Question
# =====================================================================


def test_risk_points_default_to_zero():
    """Missing tokens are filled with 0."""
    q = Question(id=1, text="Q?", risk_points={"No": 4})
    assert q.risk_points == {"Yes": 0, "No": 4, "N/A": 0}
    assert q.points_for("No") == 4
    assert q.points_for("Maybe") == 0


def test_negative_risk_points_rejected():
    """Scores only grow, so negative points are invalid."""
    with pytest.raises(ValidationError):
        Question(id=1, text="Q?", risk_points={"Yes": -1})


def test_unknown_answer_token_rejected():
    """Rule maps are keyed by answer tokens only."""
    with pytest.raises(ValidationError):
        Question(id=1, text="Q?", follow_up={"Maybe": 2})


def test_empty_follow_up_targets_dropped():
    """An empty editor selection means no edge."""
    q = Question(id=1, text="Q?", follow_up={"Yes": "", "No": None, "N/A": 5})
    assert q.follow_up == {"N/A": 5}


def test_legal_answers_per_control_type():
    """binary3 takes three tokens, binary2 two, others none."""
    assert binary(1).legal_answers == ("Yes", "No", "N/A")
    assert binary(1, control_type="binary2").legal_answers == ("Yes", "No")
    assert plain(1, "tag_list").legal_answers == ()
    assert binary(1, control_type="binary2").accepts("No")
    assert not binary(1, control_type="binary2").accepts("N/A")
    assert not binary(1).accepts(["Yes"])


def test_follow_up_targets_distinct_in_token_order():
    """Targets are listed once each, Yes before No before N/A."""
    q = binary(1, follow_up={"N/A": 4, "No": 3, "Yes": 3})
    assert q.follow_up_targets() == [3, 4]


def test_unknown_control_type_rejected():
    """The control type set is closed."""
    with pytest.raises(ValidationError):
        Question(id=1, text="Q?", control_type="slider")


@pytest.mark.parametrize(
    "control_type, good, bad",
    [
        ("binary3", "Yes", ["Yes"]),
        ("free_text", "Acme", 12),
        ("numeric", "12.5", "twelve"),
        ("numeric", 7, True),
        ("multi_select", ["California"], "California"),
        ("tag_list", [], ["8810", 5551]),
        ("composite_form", {"city": "Fresno"}, ["Fresno"]),
    ],
)
def test_answer_shape_per_control_type(control_type, good, bad):
    """Each control type accepts the value shape its widget submits."""
    q = plain(1, control_type)
    assert q.fits(good)
    assert not q.fits(bad)


# =====================================================================
# QuestionGraph
# =====================================================================


def test_graph_lookup():
    """Lookup is by id; pool order is preserved."""
    graph = QuestionGraph([binary(5), binary(2, initial=True)])
    assert graph.get_by_id(2).is_initial
    assert graph.get_by_id(9) is None
    assert [q.id for q in graph.all()] == [5, 2]
    assert [q.id for q in graph.initial_questions()] == [2]
    assert 5 in graph and 9 not in graph
    assert len(graph) == 2


def test_graph_rejects_duplicate_ids():
    """Two questions with one id cannot share a graph."""
    with pytest.raises(ValueError, match="Duplicate question id: 3"):
        QuestionGraph([binary(3), binary(3)])


def test_by_id_map_is_a_copy():
    """Callers may mutate the returned mapping freely."""
    graph = QuestionGraph([binary(1)])
    mapping = graph.by_id_map()
    mapping.pop(1)
    assert 1 in graph
