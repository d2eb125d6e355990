"""
totpcli Configuration System

Manages application paths and settings with features:
- Multi-platform data directory detection (Windows, macOS, Linux)
- Portable mode and path overrides via environment variables
- Default OTP parameters and refresh timing

Nothing here touches the filesystem at import time; directories are
created by the getters when a command actually needs them.
"""

import os
import platform

# Application information
APP_NAME = "totpcli"
APP_VERSION = "0.1.0"

# Default OTP parameters for new accounts
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30
DEFAULT_ALGORITHM = "SHA1"

# Secrets shorter than this (in bytes) are accepted but flagged as weak
WEAK_SECRET_BYTES = 10

STORE_FILENAME = "accounts.json"


def _env_flag(name):
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def _env_interval(name, default):
    """
    Read a refresh interval from the environment.

    The refresh loop must draw at least once per second, so values above
    1.0 (and anything unparsable or non-positive) fall back to the default.
    """
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if value <= 0 or value > 1.0:
        return default
    return value


def get_data_directory(create=True):
    """
    Return the platform-appropriate application data directory:
    - Windows: %APPDATA%\\totpcli
    - macOS: ~/Library/Application Support/totpcli
    - Linux: ~/.totpcli

    Handles portable mode and environment variable overrides.

    Args:
        create (bool): Create the directory (mode 0700) if it is missing

    Returns:
        str: Path to the application data directory
    """
    # Explicit override first (useful for tests and containers)
    data_dir = os.environ.get('TOTPCLI_DATA_DIR')

    if not data_dir and _env_flag('TOTPCLI_PORTABLE'):
        data_dir = os.path.join(os.getcwd(), '.totpcli')

    if not data_dir:
        if platform.system() == "Windows":
            base_dir = os.environ.get('APPDATA')
            if not base_dir:
                base_dir = os.path.join(os.path.expanduser('~'), 'AppData', 'Roaming')
            data_dir = os.path.join(base_dir, APP_NAME)
        elif platform.system() == "Darwin":
            data_dir = os.path.join(os.path.expanduser('~'), 'Library', 'Application Support', APP_NAME)
        else:
            data_dir = os.path.join(os.path.expanduser('~'), '.totpcli')

    if create:
        os.makedirs(data_dir, mode=0o700, exist_ok=True)
    return data_dir


def get_store_path():
    """
    Path of the persisted account store.

    Returns:
        str: TOTPCLI_STORE_FILE if set, else <data dir>/accounts.json
    """
    override = os.environ.get('TOTPCLI_STORE_FILE')
    if override:
        return override
    return os.path.join(get_data_directory(), STORE_FILENAME)


def get_log_directory():
    """Directory for log files when file logging is enabled."""
    return os.environ.get('TOTPCLI_LOG_DIR') or os.path.join(get_data_directory(create=False), 'logs')


# Seconds between display frames (at most one second)
REFRESH_INTERVAL = _env_interval('TOTPCLI_REFRESH_INTERVAL', 1.0)

# Debug mode and file logging
DEBUG = _env_flag('TOTPCLI_DEBUG')
LOG_TO_FILE = _env_flag('TOTPCLI_LOG')
