import json
import logging

import httpx
import pytest

from mitake_sms import AuthenticationError, MitakeSmsClient
from mitake_sms.ops.structured_logger import JsonFormatter, setup_logging


def test_json_formatter_merges_extra():
    rec = logging.makeLogRecord(
        {"name": "mitake_sms.client", "msg": "sms_send_result", "levelname": "INFO", "extra": {"endpoint": "SmSend", "ok": True}}
    )
    payload = json.loads(JsonFormatter().format(rec))
    assert payload["severity"] == "INFO"
    assert payload["message"] == "sms_send_result"
    assert payload["logger"] == "mitake_sms.client"
    assert payload["endpoint"] == "SmSend"
    assert payload["ok"] is True


def test_setup_logging_installs_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_client_logs_without_credentials_or_body(config, caplog):
    client = MitakeSmsClient(
        config, transport=httpx.MockTransport(lambda req: httpx.Response(200, text="statuscode=1\nmsgid=42"))
    )
    with caplog.at_level(logging.INFO, logger="mitake_sms.client"):
        client.send_sms("0912345678", "secret body")

    records = [r for r in caplog.records if r.name == "mitake_sms.client"]
    events = [r.extra["event"] for r in records]
    assert events == ["sms_send_attempt", "sms_send_result"]
    result = records[-1].extra
    assert result["dest"] == "...5678"
    assert result["msgid"] == "42"
    assert result["ok"] is True

    rendered = " ".join(JsonFormatter().format(r) for r in records)
    assert "test_password" not in rendered
    assert "secret body" not in rendered


def test_client_logs_http_failure(config, caplog):
    client = MitakeSmsClient(config, transport=httpx.MockTransport(lambda req: httpx.Response(401)))
    with caplog.at_level(logging.INFO, logger="mitake_sms.client"):
        with pytest.raises(AuthenticationError):
            client.send_sms("0912345678", "x")

    failed = [r for r in caplog.records if r.name == "mitake_sms.client"][-1]
    assert failed.levelno == logging.WARNING
    assert failed.extra["event"] == "sms_send_failed"
    assert failed.extra["status_code"] == 401
    assert failed.extra["error_type"] == "AuthenticationError"
