"""SessionRegistry tests — creation, lookup, discard and eviction."""

import pytest

from helpers.factories import binary

from riskcheck_rulesets.engine import QueueEngine
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_server.sessions import SessionRegistry


@pytest.fixture
def engine():
    return QueueEngine(QuestionGraph([binary(1, initial=True), binary(2, initial=True)]))


class TestRegistry:

    def test_create_starts_session(self, engine):
        """A new session sits on the first initial question."""
        registry = SessionRegistry()
        session = registry.create(engine)
        assert session.session_id in registry
        assert session.state.queue == [1, 2]
        assert session.state.current_qid == 1
        assert len(registry) == 1

    def test_session_ids_are_unique(self, engine):
        registry = SessionRegistry()
        ids = {registry.create(engine).session_id for _ in range(20)}
        assert len(ids) == 20

    def test_sessions_have_independent_state(self, engine):
        """Answering in one session leaves another untouched."""
        registry = SessionRegistry()
        a = registry.create(engine)
        b = registry.create(engine)
        a.engine.submit_answer(a.state, "No")
        assert a.state.current_index == 1
        assert b.state.current_index == 0

    def test_get_unknown_raises(self):
        """Unknown ids raise ValueError with a 'not found' message."""
        with pytest.raises(ValueError, match="not found"):
            SessionRegistry().get("missing")

    def test_discard(self, engine):
        registry = SessionRegistry()
        session = registry.create(engine)
        registry.discard(session.session_id)
        assert session.session_id not in registry
        with pytest.raises(ValueError, match="not found"):
            registry.discard(session.session_id)

    def test_oldest_session_is_evicted(self, engine):
        """Past the cap the oldest session makes room for the new one."""
        registry = SessionRegistry(max_sessions=2)
        first = registry.create(engine)
        second = registry.create(engine)
        third = registry.create(engine)
        assert len(registry) == 2
        assert first.session_id not in registry
        assert second.session_id in registry
        assert third.session_id in registry

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SessionRegistry(max_sessions=0)

    def test_info_reflects_state(self, engine):
        """info() mirrors the live state."""
        registry = SessionRegistry()
        session = registry.create(engine)
        session.engine.submit_answer(session.state, "No")
        info = session.info()
        assert info.session_id == session.session_id
        assert info.current_index == 1
        assert info.queue_length == 2
        assert not info.complete
