import json
import logging
import sys

from bridge.common.core import logging_config, request_context


def _record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="bridge.test",
        level=logging.INFO,
        pathname="test_path.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_custom_json_formatter_includes_invocation_ids():
    """The formatter picks TraceID and RequestID up from context."""
    request_context.clear_request_context()
    trace_id_str = "Root=1-abc-123;Sampled=1"
    request_context.set_trace_id(trace_id_str)
    request_context.set_request_id("req-1")

    try:
        log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))
    finally:
        request_context.clear_request_context()

    assert log_json["message"] == "Test message"
    assert log_json["level"] == "INFO"
    assert log_json["logger"] == "bridge.test"
    assert log_json["trace_id"] == trace_id_str
    assert log_json["aws_request_id"] == "req-1"
    assert "_time" in log_json


def test_custom_json_formatter_outside_invocation():
    request_context.clear_request_context()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))

    assert "trace_id" not in log_json
    assert "aws_request_id" not in log_json


def test_custom_json_formatter_includes_extras():
    record = _record(status_code=503, attempt=2)

    log_json = json.loads(logging_config.CustomJsonFormatter().format(record))

    assert log_json["status_code"] == 503
    assert log_json["attempt"] == 2


def test_custom_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(record))

    assert "ValueError: boom" in log_json["exception"]


def test_setup_logging_substitutes_environment(tmp_path, monkeypatch):
    config_file = tmp_path / "logging.yml"
    config_file.write_text(
        """
version: 1
disable_existing_loggers: false
handlers:
  null_handler:
    class: logging.NullHandler
loggers:
  bridge.setup_test:
    level: ${LOG_LEVEL}
    handlers: [null_handler]
"""
    )
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(config_file))

    assert logging.getLogger("bridge.setup_test").level == logging.WARNING


def test_setup_logging_without_file_falls_back(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    logging_config.setup_logging(str(tmp_path / "missing.yml"))

    assert calls == [{"level": "DEBUG"}]


def test_setup_logging_explicit_level_wins(tmp_path, monkeypatch):
    config_file = tmp_path / "logging.yml"
    config_file.write_text(
        """
version: 1
disable_existing_loggers: false
loggers:
  bridge.level_test:
    level: ${LOG_LEVEL}
"""
    )
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(config_file), log_level="ERROR")

    assert logging.getLogger("bridge.level_test").level == logging.ERROR
