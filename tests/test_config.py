import logging
from pathlib import Path

import pytest

from dynmodeler.config import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    ModelerConfig,
    configure_logging,
    load_config,
)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("dynmodeler")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def test_load_config(tmp_path: Path):
    path = tmp_path / "modeler.yaml"
    path.write_text(
        """
continuous_update: true
merge_tolerance: 0.01
log_level: debug
presets:
  Create Cube:
    XLength: 5
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.continuous_update is True
    assert config.merge_tolerance == pytest.approx(0.01)
    assert config.log_level == "DEBUG"
    assert config.presets == {"Create Cube": {"XLength": 5}}
    assert config.presets_for("Append") == {"MergeTolerance": 0.01}
    assert config.presets_for("Create Cube") == {"XLength": 5}


def test_empty_config(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    config = load_config(path)
    assert config == ModelerConfig()
    assert config.log_level == DEFAULT_LOG_LEVEL


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "surprise: 1\n",
    "merge_tolerance: -1\n",
    "presets: [1, 2]\n",
    "presets:\n  Append: 3\n",
    "continuous_update: \"false\"\n",
    "continuous_update: 1\n",
])
def test_bad_config(tmp_path: Path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_missing_config(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_configure_logging():
    logger = configure_logging("info")
    assert logger.level == logging.INFO
    count = len(logger.handlers)
    configure_logging(logging.WARNING)
    assert len(logger.handlers) == count
    assert logger.level == logging.WARNING
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_configure_logging_single_handler():
    logger = configure_logging("debug")
    configure_logging("debug")
    formatted = [h for h in logger.handlers
                 if h.formatter is not None and h.formatter._fmt == LOG_FORMAT]
    assert len(formatted) == 1


def test_configure_logging_after_handlers_removed():
    logger = configure_logging("info")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    configure_logging("info")
    assert len(logger.handlers) == 1
