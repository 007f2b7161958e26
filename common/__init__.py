"""
Common Utilities
Perimeter

Configuration and logging shared across packages.
"""

from common.config import Config, Settings, get_settings, load_settings, reset_settings
from common.structured_logging import JsonFormatter, configure_logging, log_with_fields

__all__ = [
    "Config",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "JsonFormatter",
    "configure_logging",
    "log_with_fields",
]
