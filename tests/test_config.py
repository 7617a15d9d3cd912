import logging

import pytest

from bnstruct.config.loader import build_config, configure_logging
from bnstruct.config.settings import BNStructConfig, LoggingConfig, NetworkConfig


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("BNSTRUCT_LAPLACE_COUNT", raising=False)
    monkeypatch.delenv("BNSTRUCT_LOG_LEVEL", raising=False)

    config = build_config()

    assert config == BNStructConfig()
    assert config.network.laplace_count == 1
    assert config.logging.level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BNSTRUCT_LAPLACE_COUNT", "3")
    monkeypatch.setenv("BNSTRUCT_LOG_LEVEL", "debug")

    config = build_config()

    assert config.network.laplace_count == 3
    assert config.logging.level == "DEBUG"


def test_negative_laplace_count_is_rejected():
    with pytest.raises(ValueError):
        NetworkConfig(laplace_count=-1)


def test_configure_logging_sets_root_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

    configure_logging(LoggingConfig(level="WARNING"))

    assert calls["level"] == logging.WARNING
