"""
Error Types for totpcli

Every failure the core can report is a subclass of TotpCliError so the
command dispatcher can catch one type, print the message and exit non-zero.

Messages are written for the user and never contain secret material.
"""


class TotpCliError(Exception):
    """Base class for all recoverable totpcli errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class InvalidSecretEncoding(TotpCliError):
    """Secret text is empty or not valid RFC 4648 Base32."""

    def __init__(self, reason, record_index=None):
        super().__init__(f"Invalid secret encoding: {reason}")
        self.reason = reason
        self.record_index = record_index


class InvalidParams(TotpCliError):
    """Digits, period or timestamp are outside the accepted range."""

    def __init__(self, reason, record_index=None):
        super().__init__(f"Invalid parameters: {reason}")
        self.reason = reason
        self.record_index = record_index


class DuplicateAccountName(TotpCliError):
    def __init__(self, name):
        super().__init__(f"An account named '{name}' already exists")
        self.name = name


class AccountNotFound(TotpCliError):
    def __init__(self, name):
        super().__init__(f"No account named '{name}'")
        self.name = name


class UnsupportedHashAlgorithm(TotpCliError):
    """Raised for any algorithm tag other than SHA1, SHA256 or SHA512."""

    def __init__(self, tag, record_index=None):
        super().__init__(f"Unsupported hash algorithm: {tag!r}")
        self.tag = tag
        self.record_index = record_index


class CorruptStore(TotpCliError):
    """The persisted account store could not be parsed."""

    def __init__(self, path, reason, record_index=None):
        super().__init__(f"Account store {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason
        self.record_index = record_index


class PersistenceFailure(TotpCliError):
    """Reading or writing the backing file failed at the OS level."""

    def __init__(self, path, reason):
        super().__init__(f"Could not access account store {path}: {reason}")
        self.path = path
        self.reason = reason
