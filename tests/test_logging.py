import json
import logging

from app.logging import JsonFormatter, MaskingFilter, mask_sensitive


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_request_id_generated_when_missing(client):
    resp = client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID")) == 32


def test_logs_include_request_id_attribute(client, caplog):
    caplog.set_level("INFO")
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_sensitive_fields_masked_in_info(app, monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    logger.info({"email": "user@example.com", "password": "secret12", "order_id": 7})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert isinstance(record.msg, dict)
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["password"] == "[REDACTED]"
    assert record.msg["order_id"] == 7


def test_sensitive_fields_visible_in_debug(app, monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert isinstance(record.msg, dict)
    assert record.msg["password"] == "secret"


def test_mask_sensitive_descends_into_nested_values():
    masked = mask_sensitive({
        "user": {"email": "a@b.co", "role": "seller"},
        "sessions": [{"refresh_token": "t1"}, {"access_token": "t2"}],
    })
    assert masked["user"] == {"email": "[REDACTED]", "role": "seller"}
    assert masked["sessions"] == [{"refresh_token": "[REDACTED]"}, {"access_token": "[REDACTED]"}]


def test_json_formatter_merges_dict_payload():
    record = logging.LogRecord("orders", logging.INFO, __file__, 1, {"event": "order_receipt", "order_id": 3}, None, None)
    record.request_id = "rid-1"
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "order_receipt"
    assert out["order_id"] == 3
    assert out["request_id"] == "rid-1"
    assert out["uid"] == "n/a"
    assert out["level"] == "INFO"
