"""Tests for settings loading and logging setup."""

import logging
from pathlib import Path

import pytest

from syslogview.config import Settings
from syslogview.utils import setup_logging

EXAMPLE = Path(__file__).parent.parent / "config" / "settings.yaml.example"


def test_example_configuration_loads():
    settings = Settings.load(EXAMPLE)
    assert settings.backend_url.endswith("/")
    assert settings.http_address["port"] == 8600
    assert settings.logging["level"] == "INFO"


def test_defaults_when_sections_are_missing(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("backend:\n  base_url: http://module:9000/syslog\n")

    settings = Settings.load(config)

    assert settings.backend_url == "http://module:9000/syslog/"
    assert settings.backend_timeout == 5.0
    assert settings.http_address == {"ip": "127.0.0.1", "port": 8600}


def test_empty_file_gives_defaults(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("")
    assert Settings.load(config).backend == {}


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Settings.load(tmp_path / "absent.yaml")


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "syslogview.log"
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging(level="debug", file=str(log_file), console=False)
        logging.getLogger("syslogview.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "INFO - syslogview.test - hello" in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
