"""
Tests for logging setup.
"""

import logging
import logging.handlers

import pytest

from speech_bubbles.core.config import Config, LoggingConfig
from speech_bubbles.utils.logger import setup_logging

TOUCHED = ("speech_bubbles.engine", "speech_bubbles.streaming", "speech_bubbles.renderer", "asyncio")


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in TOUCHED:
        logging.getLogger(name).setLevel(logging.NOTSET)


def file_handlers():
    return [h for h in logging.getLogger().handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)]


def test_handlers_follow_logging_config(tmp_path):
    config = Config(log_dir=tmp_path / "logs",
                    logging=LoggingConfig(console_level="ERROR", file_name="bubbles.log",
                                          max_file_mb=2, backup_count=1))

    log_file = setup_logging(config)

    assert log_file == tmp_path / "logs" / "bubbles.log"
    main, errors = file_handlers()
    assert main.maxBytes == 2 * 1024 * 1024
    assert main.backupCount == 1
    assert errors.level == logging.ERROR
    console = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert console[0].level == logging.ERROR


def test_component_levels_are_applied(tmp_path):
    config = Config(log_dir=tmp_path,
                    logging=LoggingConfig(levels={"speech_bubbles.renderer": "ERROR"}))

    setup_logging(config)

    assert logging.getLogger("speech_bubbles.renderer").level == logging.ERROR
    assert logging.getLogger("speech_bubbles.renderer.simulated").getEffectiveLevel() == logging.ERROR


def test_debug_flag_opens_up_engine_loggers(tmp_path):
    setup_logging(Config(log_dir=tmp_path, debug=True))

    assert logging.getLogger("speech_bubbles.engine").level == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_messages_reach_the_log_file(tmp_path):
    log_file = setup_logging(Config(log_dir=tmp_path, log_level="DEBUG"))

    logging.getLogger("speech_bubbles.engine.queue_manager").info("queue created")
    for handler in file_handlers():
        handler.flush()

    assert "queue created" in log_file.read_text()


def test_unknown_level_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        setup_logging(Config(log_dir=tmp_path, log_level="LOUD"))
