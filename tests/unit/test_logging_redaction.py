import logging

from app.utils.logging_redaction import RedactingFilter, redact_message


def test_redacts_bearer_tokens_and_api_keys():
    message = redact_message("Authorization: Bearer abc.def-123 apikey=SECRET42")

    assert "abc.def-123" not in message
    assert "SECRET42" not in message
    assert "Bearer [REDACTED]" in message


def test_redacts_database_password():
    message = redact_message("connecting to postgresql://ammo_user:hunter2@db:5432/ammo")

    assert "hunter2" not in message
    assert "ammo_user:[REDACTED]@db" in message


def test_filter_rewrites_record_with_args():
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "token %s", ("Bearer xyz",), None
    )

    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "token Bearer [REDACTED]"


def test_filter_keeps_malformed_records():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "%d", ("nan",), None)

    assert RedactingFilter().filter(record) is True
    assert record.msg == "%d"
