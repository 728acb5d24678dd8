from pathlib import Path

import platformdirs


APP_NAME = "twiauth"


def get_xdg_config_home() -> Path:
    """Get the XDG_CONFIG_HOME directory using platformdirs.

    Returns:
        Path to the user config directory (cross-platform).
    """
    return Path(platformdirs.user_config_dir())


def get_twiauth_config_dir() -> Path:
    """Get the twiauth configuration directory.

    Returns:
        Path to the twiauth directory within the user config directory.
    """
    return get_xdg_config_home() / APP_NAME


def get_default_token_file() -> Path:
    """Default location of the stored access token."""
    return get_twiauth_config_dir() / "access_token.json"
