"""Configuration loading, schema, and defaults."""

from anchorguard.config.loader import ConfigError, load_config, parse_pr_number
from anchorguard.config.schema import AnchorGuardConfig

__all__ = [
    "AnchorGuardConfig",
    "ConfigError",
    "load_config",
    "parse_pr_number",
]
