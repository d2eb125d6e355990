"""
Base32 Secret Codec

Converts between user-supplied Base32 text (RFC 4648) and raw secret bytes.

Input is normalized before decoding:
- whitespace and hyphen separators are removed ("JBSW Y3DP-EHPK 3PXP")
- letters are upper-cased
- '=' padding is optional; missing padding is restored

Output is canonical upper-case Base32 with standard padding.
"""

import re
import base64
import binascii

from ..exceptions import InvalidSecretEncoding
from ..security.secret import Secret

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_SEPARATORS = re.compile(r'[\s\-]+')
_INVALID_CHAR = re.compile(r'[^A-Za-z2-7]')

# A Base32 block is 8 characters; these remainders can never occur in
# correctly encoded data because they would leave dangling bits.
_INVALID_REMAINDERS = (1, 3, 6)


def _strip(text):
    if not isinstance(text, str):
        raise InvalidSecretEncoding("secret must be text")
    return _SEPARATORS.sub('', text).rstrip('=')


def normalize(text):
    """
    Strip separators and padding and upper-case the text.

    Any run of trailing '=' is dropped, so over-padded input such as
    "JBSWY3DP========" is accepted.

    Args:
        text (str): Raw user input

    Returns:
        str: Base32 characters only, without padding
    """
    return _strip(text).upper()


def decode(text):
    """
    Decode Base32 text into a Secret.

    Args:
        text (str): Base32 secret as typed by the user

    Returns:
        Secret: The decoded key bytes

    Raises:
        InvalidSecretEncoding: if the input is empty after stripping, holds a
            character outside A-Z/2-7, or has an impossible length
    """
    stripped = _strip(text)
    if not stripped:
        raise InvalidSecretEncoding("secret is empty")

    # Check before upper-casing: some non-ASCII letters upper-case to A-Z.
    # Report the position only; never echo secret characters back
    bad = _INVALID_CHAR.search(stripped)
    if bad:
        raise InvalidSecretEncoding(f"character at position {bad.start() + 1} is not in the Base32 alphabet")

    cleaned = stripped.upper()
    if len(cleaned) % 8 in _INVALID_REMAINDERS:
        raise InvalidSecretEncoding("secret has an invalid length for Base32")

    padded = cleaned + '=' * (-len(cleaned) % 8)
    try:
        raw = base64.b32decode(padded)
    except binascii.Error as e:
        raise InvalidSecretEncoding("secret could not be decoded") from e

    if not raw:
        raise InvalidSecretEncoding("secret is empty")
    return Secret(raw)


def encode(secret):
    """
    Encode a Secret as canonical upper-case Base32 with padding.

    Args:
        secret (Secret | bytes): The key to encode

    Returns:
        str: Base32 text suitable for backup or for the persisted store
    """
    raw = secret.get() if isinstance(secret, Secret) else bytes(secret)
    return base64.b32encode(raw).decode('ascii')


def is_valid(text):
    """True if decode() would accept the text."""
    try:
        decode(text)
    except InvalidSecretEncoding:
        return False
    return True


def group(text, size=4):
    """Split Base32 text into space separated groups for readability."""
    stripped = text.rstrip('=')
    return ' '.join(stripped[i:i + size] for i in range(0, len(stripped), size))
