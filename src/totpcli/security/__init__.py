"""
Secret handling for totpcli

This package owns everything that touches key material:
- Secret wrapper that keeps raw keys out of logs and messages
- Account records and the persisted Account Store
- Backup export (otpauth URI and QR code)
"""

from .secret import Secret

__all__ = ['Secret']
