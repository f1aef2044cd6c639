import json
import logging

from metaregistry.__version__ import __version__
from metaregistry.logging import (
    ContextFilter,
    CustomJsonFormatter,
    clear_decoration_context,
    decoration_context,
    set_decoration_context,
    setup_logging,
)
from metaregistry.logging.filters import decoration_target_var


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="sample %s",
        args=("message",),
        exc_info=None,
    )


def test_context_filter_adds_sdk_fields():
    record = _record()
    assert ContextFilter().filter(record)
    assert record.sdk_name == "metaregistry"
    assert record.sdk_version == __version__


def test_context_filter_uses_decoration_context():
    set_decoration_context(target="Service", member="run")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.decoration_target == "Service"
        assert record.decoration_member == "run"
    finally:
        clear_decoration_context()


def test_context_filter_without_context_is_graceful():
    clear_decoration_context()
    record = _record()
    assert ContextFilter().filter(record)
    assert record.decoration_target is None
    assert record.decoration_member is None


def test_decoration_context_restores_outer_values():
    with decoration_context("Outer"):
        with decoration_context("Inner", "member"):
            assert decoration_target_var.get() == "Inner"
        assert decoration_target_var.get() == "Outer"
    assert decoration_target_var.get() is None


def test_json_formatter_output():
    record = _record()
    ContextFilter().filter(record)
    record.custom_field = "extra"

    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["message"] == "sample message"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["custom_field"] == "extra"
    assert payload["sdk_name"] == "metaregistry"
    assert "trace_id" not in payload


def test_setup_logging_configures_package_logger():
    package_logger = logging.getLogger("metaregistry")
    try:
        setup_logging("debug")

        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, CustomJsonFormatter)
    finally:
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
        package_logger.propagate = True
