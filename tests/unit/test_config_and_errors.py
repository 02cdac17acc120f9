# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import importlib
import logging
import socket
import ssl

import httpx
import pytest

from fluentreq import config, log
from fluentreq.config import DEFAULT_USER_AGENT
from fluentreq.errors import (
    DeadlineExceeded,
    ErrorCategory,
    RequestCancelled,
    categorize_exception,
    error_category_to_reason,
)


def test_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("FLUENTREQ_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("FLUENTREQ_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("FLUENTREQ_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("FLUENTREQ_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("FLUENTREQ_STRICT", "yes")

    settings = config.load_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.strict is True


def test_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("FLUENTREQ_HTTP_TIMEOUT", "not-a-number")
    settings = config.load_settings()
    assert settings.timeout == config.Settings.timeout
    assert DEFAULT_USER_AGENT in settings.user_agent

    monkeypatch.setenv("FLUENTREQ_HTTP_TIMEOUT", "-3")
    assert config.load_settings().timeout == config.Settings.timeout


def test_load_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("FLUENTREQ_HTTP_TIMEOUT", "7.7")
    assert config.load_settings().timeout == 7.7
    monkeypatch.setenv("FLUENTREQ_HTTP_TIMEOUT", "8.8")
    assert config.load_settings().timeout == 8.8


def test_strict_mode_initialised_from_env(monkeypatch):
    monkeypatch.setenv("FLUENTREQ_STRICT", "1")
    importlib.reload(config)
    assert config.is_strict() is True

    monkeypatch.delenv("FLUENTREQ_STRICT")
    importlib.reload(config)
    assert config.is_strict() is False


def test_strict_mode_switches():
    assert config.is_strict() is False
    config.enable_strict_mode()
    assert config.is_strict() is True
    config.disable_strict_mode()
    assert config.is_strict() is False


def test_set_logger_replaces_and_restores_sink():
    custom = logging.getLogger("tests.sink")
    log.set_logger(custom)
    assert log.get_logger() is custom
    log.set_logger(None)
    assert log.get_logger().name == "fluentreq"


@pytest.mark.parametrize(
    "exc, expected",
    [
        (httpx.ReadTimeout("slow"), ErrorCategory.TIMEOUT),
        (DeadlineExceeded("late"), ErrorCategory.TIMEOUT),
        (RequestCancelled("stop"), ErrorCategory.CANCELLED),
        (httpx.ConnectError("refused"), ErrorCategory.CONNECTION_ERROR),
        (ssl.SSLError("bad cert"), ErrorCategory.SSL_ERROR),
        (socket.gaierror("no such host"), ErrorCategory.DNS_ERROR),
        (ConnectionResetError("reset"), ErrorCategory.CONNECTION_ERROR),
        (RuntimeError("other"), ErrorCategory.UNKNOWN_ERROR),
        (None, ErrorCategory.NONE),
    ],
)
def test_categorize_exception(exc, expected):
    assert categorize_exception(exc) is expected


def test_categorize_exception_looks_at_cause():
    try:
        try:
            raise socket.gaierror("no such host")
        except socket.gaierror as inner:
            raise httpx.ConnectError("lookup failed") from inner
    except httpx.ConnectError as exc:
        assert categorize_exception(exc) is ErrorCategory.DNS_ERROR


def test_error_category_to_reason():
    assert error_category_to_reason(ErrorCategory.TIMEOUT) == "request timed out"
    assert error_category_to_reason(ErrorCategory.NONE) == ""
    assert error_category_to_reason(None) == ""
