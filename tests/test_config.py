"""Tests for environment-driven settings and the structlog setup."""

import json
import logging

import structlog

from jsonvalidator import __version__
from jsonvalidator.config import Settings
from jsonvalidator.loader.client import DefaultSchemaClient
from jsonvalidator.logging_config import bind_load_context, clear_load_context, configure_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("JSONVALIDATOR_HTTP_TIMEOUT", raising=False)
        s = Settings(_env_file=None)
        assert s.http_timeout == 10.0
        assert s.follow_redirects is True
        assert s.user_agent == f"jsonvalidator/{__version__}"
        assert s.log_level == "warning"

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("JSONVALIDATOR_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("JSONVALIDATOR_FOLLOW_REDIRECTS", "false")
        monkeypatch.setenv("JSONVALIDATOR_LOG_JSON", "1")
        s = Settings(_env_file=None)
        assert s.http_timeout == 2.5
        assert s.follow_redirects is False
        assert s.log_json is True

    def test_client_defaults_come_from_settings(self, monkeypatch):
        from jsonvalidator.loader import client as client_module

        monkeypatch.setattr(client_module, "settings", Settings(_env_file=None, http_timeout=1.5))
        assert DefaultSchemaClient().timeout == 1.5
        assert DefaultSchemaClient(timeout=4.0).timeout == 4.0


class TestLogging:
    def test_configure_logging_installs_single_stderr_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug", json_output=True)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_unknown_level_falls_back_to_warning(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("loud")
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_load_context_is_bound_and_cleared(self):
        bind_load_context("schema.json", run="1")
        assert structlog.contextvars.get_contextvars() == {"source": "schema.json", "run": "1"}
        clear_load_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_json_lines_carry_bound_source(self, capsys):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("info", json_output=True)
            bind_load_context("schema.json")
            logging.getLogger("jsonvalidator.loader").info("fetching remote document")
        finally:
            clear_load_context()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert line["event"] == "fetching remote document"
        assert line["level"] == "info"
        assert line["source"] == "schema.json"
        assert "ts" in line
