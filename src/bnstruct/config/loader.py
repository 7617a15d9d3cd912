from __future__ import annotations

from functools import lru_cache
import logging

from dynaconf import Dynaconf

from bnstruct.config.constants import DEFAULTS
from bnstruct.config.settings import BNStructConfig, LoggingConfig, NetworkConfig


def _settings() -> Dynaconf:
    return Dynaconf(
        envvar_prefix="BNSTRUCT",
        load_dotenv=True,
        settings_files=[],
    )


def build_config(settings: Dynaconf | None = None) -> BNStructConfig:
    """
    Build a BNStructConfig from dynaconf settings.

    BNSTRUCT_* environment variables override the built-in defaults.
    """
    if settings is None:
        settings = _settings()

    return BNStructConfig(
        network=NetworkConfig(
            laplace_count=int(
                settings.get("LAPLACE_COUNT", DEFAULTS["LAPLACE_COUNT"])
            ),
        ),
        logging=LoggingConfig(
            level=str(settings.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"])).upper(),
            format=settings.get("LOG_FORMAT", DEFAULTS["LOG_FORMAT"]),
        ),
    )


@lru_cache
def load_config() -> BNStructConfig:
    return build_config()


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Install a root handler for applications that do not configure
    logging themselves.
    """
    if config is None:
        config = load_config().logging

    logging.basicConfig(
        level=getattr(logging, config.level, logging.INFO),
        format=config.format,
    )
