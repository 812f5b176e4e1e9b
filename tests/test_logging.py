import json
import logging

import structlog

from digisign.logging import configure_logging, redact_secrets


def test_redact_secrets_hides_key_material():
    event = {
        "event": "document_signed",
        "username": "alice",
        "signature": "MEUCIQ...",
        "private_key": "MIGHAgEA...",
        "payload": b"\x00" * 32,
    }
    redacted = redact_secrets(None, "info", dict(event))
    assert redacted["username"] == "alice"
    assert redacted["signature"] == "[redacted]"
    assert redacted["private_key"] == "[redacted]"
    assert redacted["payload"] == "<32 bytes>"


def test_configured_logger_emits_redacted_json(capsys):
    configure_logging("debug")
    try:
        structlog.get_logger("digisign.test").info("key_loaded", key="MIGHAgEA", username="alice")
        line = capsys.readouterr().err.strip().splitlines()[-1]
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
    record = json.loads(line)
    assert record["msg"] == "key_loaded"
    assert record["component"] == "digisign.test"
    assert record["key"] == "[redacted]"
    assert record["username"] == "alice"
