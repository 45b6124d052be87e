"""
Tests for structured logging and request context
"""

import pytest

from eventbook.logging import (
    RequestContextFilter,
    clear_request_context,
    configure_logging,
    generate_request_id,
    get_caller_id,
    get_logger,
    get_request_id,
    set_request_context,
)
from eventbook.middleware import _operation_from_document, sanitize_query_params


@pytest.fixture(autouse=True)
def clean_context():
    clear_request_context()
    yield
    clear_request_context()


class TestRequestContext:
    def test_generated_request_id_is_compact(self):
        request_id = generate_request_id()

        assert len(request_id) == 14
        assert request_id != generate_request_id()

    def test_set_and_clear(self):
        set_request_context(request_id="req-123", caller_id="user-456")

        assert get_request_id() == "req-123"
        assert get_caller_id() == "user-456"

        clear_request_context()

        assert get_request_id() is None
        assert get_caller_id() is None

    def test_request_id_generated_when_missing(self):
        set_request_context()

        assert len(get_request_id()) == 14
        assert get_caller_id() is None

    def test_filter_adds_context_to_event(self):
        set_request_context(request_id="req-123", caller_id="user-456")

        event = RequestContextFilter()(None, "info", {"event": "hello"})

        assert event == {"event": "hello", "request_id": "req-123", "caller_id": "user-456"}

    def test_filter_without_context(self):
        assert RequestContextFilter()(None, "info", {"event": "hello"}) == {"event": "hello"}

    @pytest.mark.parametrize("debug", [True, False])
    def test_configured_logger_accepts_structured_fields(self, debug, capsys):
        configure_logging(debug=debug)
        logger = get_logger(__name__)
        set_request_context(request_id="req-789")

        logger.info("Message with data", key="value", count=42)

        assert "Message with data" in capsys.readouterr().out


class TestRequestLogSanitizing:
    def test_sensitive_params_redacted(self):
        params = {"password": "pw", "api_key": "k", "page": "2"}

        assert sanitize_query_params(params) == {
            "password": "[REDACTED]",
            "api_key": "[REDACTED]",
            "page": "2",
        }

    @pytest.mark.parametrize(
        ("document", "expected"),
        [
            ("query ListEvents { events { title } }", "ListEvents"),
            ("mutation AddUser($u: UserInput!) { createUser(userInput: $u) { id } }",
             "mutation:AddUser"),
            ("{ events { title } }", "unnamed_operation"),
            ("query IntrospectionQuery { __schema { types { name } } }", "__introspection"),
            ("", None),
        ],
    )
    def test_operation_name_from_document(self, document, expected):
        assert _operation_from_document(document) == expected
