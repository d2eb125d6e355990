"""
OTP Engine

RFC 4226 HOTP applied in RFC 6238 TOTP mode:

1. counter = floor(timestamp / period), packed as an 8-byte big-endian integer
2. digest = HMAC(secret, counter) with SHA1, SHA256 or SHA512
3. dynamic truncation: offset = low nibble of the last digest byte, take the
   4 bytes at that offset as a big-endian integer with the top bit masked
4. code = value mod 10^digits, left-padded with zeros to exactly `digits`

The engine never reads the clock; the timestamp is always an argument so
every result can be checked against the RFC 6238 Appendix B vectors.
"""

import hmac
import struct
import hashlib
from enum import Enum
from dataclasses import dataclass
import logging

from .. import config
from ..exceptions import InvalidParams, UnsupportedHashAlgorithm

logger = logging.getLogger(__name__)

MAX_COUNTER = 2 ** 64 - 1
# 2**31 - 1 has 10 decimal digits
MAX_TRUNCATED_DIGITS = 10


class HashAlgorithm(Enum):
    """HMAC hash functions allowed for TOTP, valued by their persisted tag."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digestmod(self):
        return _DIGESTS[self]

    @property
    def digest_size(self):
        return self.digestmod().digest_size

    @classmethod
    def from_tag(cls, tag):
        """
        Resolve an algorithm tag such as "SHA1" or "sha256".

        Raises:
            UnsupportedHashAlgorithm: for anything else
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            try:
                return cls(tag.strip().upper().replace('-', ''))
            except ValueError:
                pass
        raise UnsupportedHashAlgorithm(tag)


_DIGESTS = {
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def validate_digits(digits):
    # bool is an int subclass; True must not pass as 1 digit
    if isinstance(digits, bool) or not isinstance(digits, int) or digits <= 0:
        raise InvalidParams(f"digits must be a positive integer, got {digits!r}")
    return digits


def validate_period(period):
    # Sub-second (and fractional) periods are not supported
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidParams(f"period must be a positive whole number of seconds, got {period!r}")
    return period


@dataclass(frozen=True)
class OtpParams:
    """Code length, time step and hash function of a TOTP account."""

    digits: int = config.DEFAULT_DIGITS
    period: int = config.DEFAULT_PERIOD
    algorithm: HashAlgorithm = HashAlgorithm(config.DEFAULT_ALGORITHM)

    def validate(self):
        """
        Check the parameters and return a copy with the algorithm resolved.

        Raises:
            InvalidParams: digits or period not a positive integer
            UnsupportedHashAlgorithm: unknown algorithm tag
        """
        validate_digits(self.digits)
        validate_period(self.period)
        algorithm = HashAlgorithm.from_tag(self.algorithm)
        if not 6 <= self.digits <= 8:
            logger.debug(f"Using non-standard code length of {self.digits} digits")
        return OtpParams(self.digits, self.period, algorithm)


@dataclass(frozen=True)
class ComputedCode:
    """Transient result of one computation for one account. Never persisted."""

    name: str
    code: str
    seconds_remaining: int


def _validate_timestamp(timestamp):
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidParams(f"timestamp must be whole seconds, got {timestamp!r}")
    if timestamp < 0:
        raise InvalidParams("timestamp must not be before the Unix epoch")
    return timestamp


def time_counter(timestamp, period):
    """TOTP counter for a timestamp: floor(timestamp / period)."""
    counter = _validate_timestamp(timestamp) // validate_period(period)
    if counter > MAX_COUNTER:
        raise InvalidParams("timestamp is out of range")
    return counter


def seconds_remaining(timestamp, period):
    """
    Seconds until the code for `timestamp` expires.

    Returns:
        int: period - (timestamp mod period), always in 1..period
    """
    return validate_period(period) - (_validate_timestamp(timestamp) % period)


def dynamic_truncate(digest):
    """
    RFC 4226 dynamic truncation of an HMAC digest.

    Args:
        digest (bytes): HMAC output, at least 20 bytes

    Returns:
        int: 31-bit unsigned integer
    """
    offset = digest[-1] & 0x0F
    return struct.unpack('>I', digest[offset:offset + 4])[0] & 0x7FFFFFFF


def format_code(value, digits):
    """Render value mod 10^digits as a zero-padded decimal string."""
    validate_digits(digits)
    # Truncated values are below 2**31; skip building 10**digits for huge digits
    if digits < MAX_TRUNCATED_DIGITS or value >= 10 ** MAX_TRUNCATED_DIGITS:
        value %= 10 ** digits
    return str(value).zfill(digits)


def hotp(secret, counter, digits=config.DEFAULT_DIGITS, algorithm=HashAlgorithm.SHA1):
    """
    Compute an HOTP value for an explicit counter.

    Args:
        secret (Secret): Shared key, borrowed for this call only
        counter (int): 0 <= counter < 2**64
        digits (int): Code length
        algorithm (HashAlgorithm | str): HMAC hash function

    Returns:
        str: Zero-padded code of exactly `digits` characters
    """
    algorithm = HashAlgorithm.from_tag(algorithm)
    validate_digits(digits)
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidParams("counter is out of range")

    message = struct.pack('>Q', counter)
    digest = hmac.new(secret.get(), message, algorithm.digestmod).digest()
    return format_code(dynamic_truncate(digest), digits)


def compute_code(secret, timestamp, params=None):
    """
    Compute the TOTP code valid at `timestamp`.

    Pure function of (secret, timestamp, params): any two timestamps in
    the same period give the same code.

    Args:
        secret (Secret): Shared key
        timestamp (int): Seconds since the Unix epoch
        params (OtpParams): Defaults to 6 digits / 30 s / SHA1

    Returns:
        str: The code as a zero-padded digit string
    """
    params = params or OtpParams()
    algorithm = HashAlgorithm.from_tag(params.algorithm)
    counter = time_counter(timestamp, params.period)
    return hotp(secret, counter, params.digits, algorithm)


def code_for_account(account, now):
    """
    Current code and remaining validity for an account.

    Args:
        account: Object with name, secret and params attributes
        now (int | float): Seconds since the epoch; fractions are dropped

    Returns:
        ComputedCode
    """
    timestamp = int(now)
    params = account.params
    code = compute_code(account.secret, timestamp, params)
    return ComputedCode(account.name, code, seconds_remaining(timestamp, params.period))


def compute(account, now):
    """
    Dispatcher-facing shorthand returning (code, seconds_remaining).
    """
    result = code_for_account(account, now)
    return result.code, result.seconds_remaining
