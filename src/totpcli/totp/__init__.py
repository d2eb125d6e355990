"""
TOTP-related modules for totpcli
"""

from .engine import (
    HashAlgorithm,
    OtpParams,
    ComputedCode,
    compute_code,
    code_for_account,
    hotp,
)

__all__ = [
    'HashAlgorithm',
    'OtpParams',
    'ComputedCode',
    'compute_code',
    'code_for_account',
    'hotp',
]
