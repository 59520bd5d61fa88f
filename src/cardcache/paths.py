"""XDG-compliant directory paths for cardcache."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Get XDG-compliant configuration directory.

    Priority:
    1. $XDG_CONFIG_HOME/cardcache/
    2. ~/.config/cardcache/

    Returns:
        Path to configuration directory (not created)
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "cardcache"
    return Path.home() / ".config" / "cardcache"


def get_data_dir() -> Path:
    """Get XDG-compliant data directory, the default cache root.

    Priority:
    1. $XDG_DATA_HOME/cardcache/
    2. ~/.local/share/cardcache/

    Returns:
        Path to data directory (not created)
    """
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "cardcache"
    return Path.home() / ".local" / "share" / "cardcache"
