"""Error classification tests: SDK messages to HTTP statuses."""

import pytest

from riskcheck_server.errors import classify_value_error


@pytest.mark.parametrize(
    "message, status, detail",
    [
        ("Cannot submit answer: session is already complete", 409, "Session is already complete"),
        ("Session not found: session_id=abc", 404, "Session not found"),
        ("Question not found: id=9", 404, "Question not found"),
        ("Duplicate question id 5", 409, "Question ids must be unique"),
        ("something else went wrong", 400, "Invalid request"),
    ],
)
def test_classify(message, status, detail):
    assert classify_value_error(message) == (status, detail)


def test_raw_message_never_returned():
    """The client detail never contains the raw message."""
    _, detail = classify_value_error("Session not found: session_id=secret-token")
    assert "secret-token" not in detail
