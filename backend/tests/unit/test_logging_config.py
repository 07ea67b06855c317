"""
Unit tests for structured logging.
"""

import json
import logging

from infrastructure.logging_config import JSONFormatter, SensitiveDataFilter


def _record(msg, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("services.newsletter", logging.ERROR, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_structured_fields_are_included(self):
        record = _record(
            "Newsletter delivery failed",
            recipient="a@example.com",
            content_kind="blog",
            content_id="b-1",
            outcome="failed",
            reason="mailbox unavailable",
        )

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "ERROR"
        assert payload["logger"] == "services.newsletter"
        assert payload["recipient"] == "a@example.com"
        assert payload["outcome"] == "failed"
        assert payload["reason"] == "mailbox unavailable"

    def test_unknown_extras_are_not_copied(self):
        payload = json.loads(JSONFormatter().format(_record("x", something_else=1)))
        assert "something_else" not in payload


class TestSensitiveDataFilter:
    def test_unsubscribe_tokens_are_redacted(self):
        record = _record("Link: https://site/unsubscribe/%s", "ab" * 32)

        SensitiveDataFilter().filter(record)

        assert "abab" not in record.getMessage()
        assert "/unsubscribe/[REDACTED]" in record.getMessage()

    def test_api_keys_are_redacted(self):
        record = _record("using re_" + "x" * 24)
        SensitiveDataFilter().filter(record)
        assert record.getMessage() == "using [REDACTED_API_KEY]"

    def test_other_arguments_are_formatted_once(self):
        record = _record("Sent %s email to %s", "welcome", "a@example.com")

        SensitiveDataFilter().filter(record)

        assert record.args == ()
        assert record.getMessage() == "Sent welcome email to a@example.com"
