"""
Configuration layer for bnstruct.

Configuration in bnstruct is:
- Explicit (passed into the node manager, not global)
- Typed (validated at construction time)
- Overridable from BNSTRUCT_* environment variables via dynaconf
"""

from bnstruct.config.settings import (
    NetworkConfig,
    LoggingConfig,
    BNStructConfig,
)
from bnstruct.config.loader import build_config, load_config, configure_logging

__all__ = [
    "NetworkConfig",
    "LoggingConfig",
    "BNStructConfig",
    "build_config",
    "load_config",
    "configure_logging",
]
