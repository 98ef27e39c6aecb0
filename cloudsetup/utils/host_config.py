"""
Host-specific override file lookup.

When no --config file is given, a machine can still carry its own overrides:
1. ~/.config/cloud-setup/{hostname}.env
2. ~/.config/cloud-setup/settings.env
"""

import logging
import socket
from pathlib import Path
from typing import List, Optional

DEFAULT_CONFIG_DIR = Path("~/.config/cloud-setup")


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split('.')[0]


def find_default_override_file(config_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Return the override file to use when none was given on the command line.

    Returns:
        Path to the host-specific file if present, else the generic
        settings.env if present, else None.
    """
    base = (config_dir or DEFAULT_CONFIG_DIR).expanduser()

    host_settings = base / f"{get_hostname()}.env"
    if host_settings.is_file():
        logging.debug(f"Found host-specific configuration: {host_settings}")
        return host_settings

    base_settings = base / "settings.env"
    if base_settings.is_file():
        return base_settings

    return None


def list_all_settings_files(config_dir: Optional[Path] = None) -> List[str]:
    """List all override files in the config directory (generic + host-specific)."""
    base = (config_dir or DEFAULT_CONFIG_DIR).expanduser()
    if not base.is_dir():
        return []
    return sorted(str(p) for p in base.glob("*.env"))
