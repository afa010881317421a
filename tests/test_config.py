import logging

import pytest

from expense_planner.config import Config
from expense_planner.logger import LOG_FORMAT, setup_logger


def test_config_defaults_are_paths():
    assert Config.DATA_PATH.suffix == ".json"
    assert Config.USERS_PATH.suffix == ".json"


def test_validate_rejects_unknown_level(monkeypatch):
    monkeypatch.setattr(Config, "LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        Config.validate()
    monkeypatch.setattr(Config, "LOG_LEVEL", "debug")
    Config.validate()


def test_setup_logger_levels():
    logger = setup_logger("expense_planner.test", "warning")
    assert logger.name == "expense_planner.test"
    assert logging.getLogger().level == logging.WARNING
    setup_logger(level="nonsense")
    assert logging.getLogger().level == logging.INFO


def test_setup_logger_names_the_module():
    setup_logger(level="info")
    formats = [h.formatter._fmt for h in logging.getLogger().handlers if h.formatter]
    assert LOG_FORMAT in formats
    assert "%(name)s" in LOG_FORMAT
