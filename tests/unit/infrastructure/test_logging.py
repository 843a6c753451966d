"""Tests for loguru sink configuration."""

import json
import logging
from pathlib import Path

import pytest
from loguru import logger

from src.rel.runtime.config.config_data import ConfigData, LoggingConfig
from src.rel.runtime.logging_setup import configure_logging


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    def test_plain_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "rel.log"
        configure_logging(ConfigData(logging=LoggingConfig(file=str(log_file))))

        logger.info("Products: [foo:Foo]")
        logger.complete()

        assert "Products: [foo:Foo]" in log_file.read_text()

    def test_json_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "rel.jsonl"
        configure_logging(ConfigData(logging=LoggingConfig(file=str(log_file), format="json")))

        logger.warning("Specs: [fspec:1]")
        logger.complete()

        [line] = log_file.read_text().splitlines()
        record = json.loads(line)["record"]
        assert record["message"] == "Specs: [fspec:1]"
        assert record["level"]["name"] == "WARNING"

    def test_level_filters_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "rel.log"
        configure_logging(ConfigData(logging=LoggingConfig(level="WARNING", file=str(log_file))))

        logger.info("hidden")
        logger.error("shown")
        logger.complete()

        content = log_file.read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_stdlib_records_are_forwarded(self, tmp_path: Path):
        log_file = tmp_path / "rel.log"
        configure_logging(ConfigData(logging=LoggingConfig(file=str(log_file))))

        logging.getLogger("rel.tests").warning("from the standard library")
        logger.complete()

        assert "from the standard library" in log_file.read_text()
