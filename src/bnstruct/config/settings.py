from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ---------------------------------------------------------------------
# Structural edits & parameter estimation
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class NetworkConfig:
    """
    Controls how the node manager commits structural edits and
    re-estimates the affected CPD trees.
    """

    # Default Laplace count handed to the CPD builder
    laplace_count: int = 1

    def __post_init__(self) -> None:
        if self.laplace_count < 0:
            raise ValueError("laplace_count must be non-negative")


# ---------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging policy for applications embedding bnstruct.

    The library itself only emits records; handlers are installed by
    configure_logging() when an application asks for it.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class BNStructConfig:
    """
    Root configuration object for bnstruct.

    Constructed explicitly (or via load_config) and passed into the
    node manager; never read from global state.
    """

    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
