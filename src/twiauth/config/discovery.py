import os
from pathlib import Path

from twiauth.core.system import get_twiauth_config_dir


CONFIG_FILE_ENV = "TWIAUTH_CONFIG_FILE"


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for twiauth.

    Searches in the following order:
    1. The file named by the TWIAUTH_CONFIG_FILE environment variable
    2. .twiauth.toml in current directory
    3. twiauth.toml in current directory
    4. config.toml in user config directory/twiauth/ (platform-specific)
    """
    env_path = os.environ.get(CONFIG_FILE_ENV)
    if env_path:
        return Path(env_path)

    candidates = [
        Path(".twiauth.toml").resolve(),
        Path("twiauth.toml").resolve(),
        get_twiauth_config_dir() / "config.toml",
    ]

    # Return first existing file
    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None
