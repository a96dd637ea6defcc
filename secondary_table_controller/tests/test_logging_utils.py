import logging

from secondary_table_controller.lib import logging_utils
from secondary_table_controller.lib.logging_utils import CustomFormatter, setup_logging


def test_env_override_sets_level(monkeypatch):
    monkeypatch.setenv("STC_LOG_LEVEL", "warning")

    setup_logging(level=logging.DEBUG)

    assert logging.getLogger().level == logging.WARNING


def test_unknown_env_value_keeps_requested_level(monkeypatch):
    monkeypatch.setenv("STC_LOG_LEVEL", "chatty")

    setup_logging(level=logging.ERROR)

    assert logging.getLogger().level == logging.ERROR


def test_plain_format_without_color(monkeypatch):
    monkeypatch.setattr(CustomFormatter, "USE_COLOR", False)
    record = logging.LogRecord(
        "secondary_table_controller.test", logging.ERROR, __file__, 10, "boom", None, None
    )

    line = CustomFormatter().format(record)

    assert "\x1b[" not in line
    assert "ERROR | secondary_table_controller.test: boom" in line


def test_force_color_env(monkeypatch):
    monkeypatch.setenv("FORCE_COLOR", "1")

    assert logging_utils.supports_color()
