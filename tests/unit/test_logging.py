# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging helpers."""

import logging

import structlog

from opened_catalog.core.config.settings import Settings
from opened_catalog.utils import bind_context, clear_context, setup_logging


class TestContext:
    """Tests for bound logging context."""

    def test_bind_and_clear(self):
        bind_context(report_name="K-ratings.csv")

        assert structlog.contextvars.get_contextvars() == {"report_name": "K-ratings.csv"}

        clear_context()

        assert structlog.contextvars.get_contextvars() == {}


class TestSetupLogging:
    """Tests for logging configuration."""

    def test_package_logger_follows_log_level(self):
        setup_logging(Settings(log_level="WARNING"))

        assert logging.getLogger("opened_catalog").level == logging.WARNING

    def test_driver_loggers_quieted(self):
        setup_logging(Settings(log_level="DEBUG"))

        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("sqlalchemy").level == logging.WARNING
