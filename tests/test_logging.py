"""Tests for logging helpers."""

from __future__ import annotations

import logging

from moodle_external.utils.logging import get_logger, setup_logging


def test_loggers_live_under_package_namespace():
    assert get_logger("moodle_external.validation.validator").name == "moodle_external.validation.validator"
    assert get_logger("plugins.local").name == "moodle_external.plugins.local"


def test_setup_logging_writes_log_file(tmp_path):
    log_file = tmp_path / "logs" / "validator.log"

    setup_logging(logging.DEBUG, log_file=log_file)
    get_logger("moodle_external.tests").debug("checking path courses.id")

    assert "checking path courses.id" in log_file.read_text(encoding="utf-8")

    setup_logging(logging.WARNING)
