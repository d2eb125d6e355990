"""
totpcli: terminal TOTP authenticator

Generates RFC 6238 time-based one-time passwords for locally stored
accounts and shows them live with a countdown to expiry.
"""

from .config import APP_NAME, APP_VERSION

__version__ = APP_VERSION

__all__ = ['APP_NAME', 'APP_VERSION', '__version__']
