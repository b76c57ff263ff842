"""Log formatting and the request logging middleware."""

import json
import logging
import sys

from src.notevault.core.logging import (
    ColoredFormatter,
    JSONFormatter,
    LoggingMiddleware,
    build_logging_config,
    get_log_level,
    get_logger,
)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("notevault.test", logging.INFO, __file__, 10, msg, (), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields():
    output = json.loads(JSONFormatter().format(make_record(note_id="n1", count=2)))
    assert output["message"] == "hello"
    assert output["level"] == "INFO"
    assert output["extra"] == {"note_id": "n1", "count": 2}


def test_json_formatter_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    output = json.loads(JSONFormatter().format(record))
    assert output["exception"]["type"] == "ValueError"
    assert output["exception"]["message"] == "boom"


def test_colored_formatter_leaves_record_untouched():
    record = make_record()
    formatted = ColoredFormatter("%(levelname)s %(name)s %(message)s").format(record)
    assert "\033[" in formatted
    assert record.levelname == "INFO"
    assert record.name == "notevault.test"


def test_get_log_level():
    assert get_log_level("debug") == logging.DEBUG
    assert get_log_level("nonsense") == logging.INFO


def test_logging_config_routes_app_loggers(tmp_path):
    config = build_logging_config(tmp_path)
    assert config["handlers"]["file"]["filename"].startswith(str(tmp_path))
    assert "notevault" in config["loggers"]
    assert "src.notevault" in config["loggers"]


def test_get_logger_namespace():
    assert get_logger("cli").name == "notevault.cli"


async def test_logging_middleware_logs_request_and_response(caplog):
    async def app(scope, receive, send):
        await send({"type": "http.response.start", "status": 204, "headers": []})
        await send({"type": "http.response.body", "body": b""})

    sent = []

    async def send(message):
        sent.append(message)

    async def receive():
        return {"type": "http.request"}

    scope = {"type": "http", "method": "GET", "path": "/api/notes/", "query_string": b"page=2", "client": ("1.2.3.4", 1)}
    with caplog.at_level(logging.INFO, logger="notevault.http"):
        await LoggingMiddleware(app)(scope, receive, send)

    assert [m["type"] for m in sent] == ["http.response.start", "http.response.body"]
    messages = [r for r in caplog.records if r.name == "notevault.http"]
    assert [r.getMessage() for r in messages] == ["HTTP Request", "HTTP Response"]
    assert messages[1].status_code == 204
    assert messages[0].request_id == messages[1].request_id
