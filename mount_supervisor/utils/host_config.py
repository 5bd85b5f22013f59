"""
Host-specific configuration lookup.

Selects a hostname-specific settings file when one exists, so one shared
deployment directory can serve several machines.
"""

import socket
from pathlib import Path
import logging


BASE_SETTINGS_FILE = "settings.env"


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split('.')[0]


def get_hostname_settings_file(base_dir: str = ".") -> str:
    """
    Get the appropriate settings file for this host.

    Logic:
    1. Get current hostname
    2. Use {hostname}-settings.env if it exists
    3. Otherwise fall back to settings.env

    Returns:
        str: Path to the settings file to load (may not exist)
    """
    base_settings = Path(base_dir) / BASE_SETTINGS_FILE
    try:
        host_settings = Path(base_dir) / f"{get_hostname()}-settings.env"
    except OSError as e:
        logging.getLogger("mount_supervisor.host_config").warning(
            f"Could not determine hostname, using {base_settings}: {e}"
        )
        return str(base_settings)

    if host_settings.exists():
        return str(host_settings)
    return str(base_settings)


def list_all_settings_files(base_dir: str = ".") -> list[str]:
    """
    List all available settings files (base + host-specific).

    Returns:
        list[str]: List of settings file paths
    """
    settings_files = []

    base_settings = Path(base_dir) / BASE_SETTINGS_FILE
    if base_settings.exists():
        settings_files.append(str(base_settings))

    for file_path in sorted(Path(base_dir).glob("*-settings.env")):
        settings_files.append(str(file_path))

    return settings_files
