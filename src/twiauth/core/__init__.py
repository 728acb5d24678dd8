"""Core utilities shared across twiauth."""

from .logging import setup_logging
from .system import get_default_token_file, get_twiauth_config_dir


__all__ = [
    "get_default_token_file",
    "get_twiauth_config_dir",
    "setup_logging",
]
