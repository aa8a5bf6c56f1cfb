import logging

import pytest

from guildhall.config import Settings
from guildhall.utils.logging import ColorFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_writes_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "guildhall.log"

    logger = setup_logging(level="debug", log_file=log_file, enable_color=False)
    logger.debug("hero hero_1 rested")

    assert logger.name == "guildhall"
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("werkzeug").level == logging.WARNING
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hero hero_1 rested" in log_file.read_text(encoding="utf-8")


def test_color_formatter_wraps_level_name():
    record = logging.LogRecord("guildhall", logging.WARNING, __file__, 1, "careful", None, None)
    formatted = ColorFormatter("[%(levelname)s] %(message)s").format(record)

    assert formatted == "[\033[33mWARNING\033[0m] careful"


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("GUILDHALL_PORT", "4000")
    monkeypatch.setenv("GUILDHALL_ORACLE_ENABLED", "false")

    settings = Settings(_env_file=None)

    assert settings.port == 4000
    assert settings.oracle_enabled is False
    assert settings.max_commit_retries == 3
    assert settings.oracle_timeout == 8.0
