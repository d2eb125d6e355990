"""
File Utilities

Provides utility functions for file operations.
"""

import os
import platform
import tempfile
import logging

logger = logging.getLogger(__name__)


def secure_file_permissions(path):
    """
    Restrict a file to its owner (0600).

    Best effort: Windows ignores POSIX modes, so failures are only logged.
    """
    if platform.system() == "Windows":
        return
    try:
        os.chmod(path, 0o600)
    except OSError as e:
        logger.warning(f"Could not set permissions on {path}: {e}")


def atomic_write(file_path, content, encoding='utf-8'):
    """
    Write text to a file atomically.

    The content goes to a temporary file in the target's directory, is
    flushed and fsync'ed, and then replaces the target with os.replace, so
    a crash leaves either the old file or the new one, never a partial one.

    Args:
        file_path: Target file path
        content (str): Text to write
        encoding: Text encoding

    Raises:
        OSError: if any step fails; the temporary file is removed first
    """
    dir_path = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(dir_path, mode=0o700, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(prefix=f".{os.path.basename(file_path)}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, 'w', encoding=encoding) as f:
            f.write(content)
            # Ensure data is flushed to disk
            f.flush()
            os.fsync(f.fileno())

        secure_file_permissions(temp_path)

        # Atomic on POSIX and on Windows for same-volume paths
        os.replace(temp_path, file_path)
    except BaseException:
        # Clean up temp file if it exists
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise

    logger.debug(f"Wrote {len(content)} characters to {file_path}")
