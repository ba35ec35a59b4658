from __future__ import annotations

import json

from loguru import logger

from floorcore.logging_config import json_format, record_to_dict, setup_logging
from floorcore.settings import LoggingSettings


def test_json_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "floorcore.log"
    setup_logging(LoggingSettings(level="debug", json_format=True, log_file=log_file))
    try:
        logger.bind(wall_id="w1").info("Merged {} walls", 2)
    finally:
        logger.remove()

    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Merged 2 walls"
    assert record["level"] == "INFO"
    assert record["wall_id"] == "w1"
    assert record["logger"] == __name__


def test_level_override_filters_records(tmp_path):
    log_file = tmp_path / "floorcore.log"
    setup_logging(LoggingSettings(level="DEBUG", json_format=True, log_file=log_file), level="warning")
    try:
        logger.info("hidden")
        logger.warning("shown")
    finally:
        logger.remove()

    messages = [json.loads(line)["message"] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert messages == ["shown"]


def test_json_format_escapes_braces():
    messages = []
    logger.remove()
    handler = logger.add(messages.append, format=json_format, level="INFO")
    try:
        logger.info("ring {}", {"x": 1})
    finally:
        logger.remove(handler)
    assert json.loads(str(messages[0]))["message"] == "ring {'x': 1}"


def test_exceptions_are_summarised():
    records = []
    logger.remove()
    handler = logger.add(lambda message: records.append(record_to_dict(message.record)), level="ERROR")
    try:
        try:
            raise ValueError("bad ring")
        except ValueError:
            logger.exception("Union failed")
    finally:
        logger.remove(handler)
    assert records[0]["error"] == "ValueError: bad ring"
    assert records[0]["level"] == "ERROR"
