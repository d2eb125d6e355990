"""
Backup export for totpcli accounts

Lets the user copy an account into another authenticator:
- otpauth:// provisioning URI (built by pyotp)
- the same URI as a QR code, either drawn in the terminal or saved as PNG

Export is the one place the Base32 form of a stored secret is shown again,
so every call here is an explicit user request.
"""

import os
import io
import logging

import pyotp
import qrcode

from ..totp import codec
from ..totp.engine import HashAlgorithm, MAX_TRUNCATED_DIGITS
from ..exceptions import InvalidParams

logger = logging.getLogger(__name__)

MAX_URI_DIGITS = MAX_TRUNCATED_DIGITS


def generate_secret(length=32):
    """
    Create a random Base32 secret.

    Args:
        length (int): Base32 characters; the default of 32 gives 160 bits,
            the key size RFC 4226 recommends for SHA1

    Returns:
        str: Upper-case Base32 text without padding
    """
    return pyotp.random_base32(length)


def export_to_otpauth_uri(account, issuer=None):
    """
    Convert an account to otpauth URI format.

    Args:
        account (Account): The account to export
        issuer (str): Optional issuer shown by the importing app

    Returns:
        str: otpauth://totp/... URI including non-default digits, period
            and algorithm
    """
    if account.params.digits > MAX_URI_DIGITS:
        raise InvalidParams(f"otpauth URIs support at most {MAX_URI_DIGITS} digits")
    algorithm = HashAlgorithm.from_tag(account.params.algorithm)
    totp = pyotp.TOTP(
        codec.encode(account.secret).rstrip('='),
        digits=account.params.digits,
        digest=algorithm.digestmod,
        interval=account.params.period,
        name=account.name,
        issuer=issuer,
    )
    uri = totp.provisioning_uri()
    logger.debug(f"Created otpauth URI for '{account.name}'")
    return uri


def _build_qr(data, border):
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_qr_ascii(data, invert=True):
    """
    Draw a QR code with block characters for display in a terminal.

    Args:
        data (str): Payload, normally an otpauth URI
        invert (bool): Light-on-dark output for dark terminal themes

    Returns:
        str: Multi-line QR drawing
    """
    out = io.StringIO()
    _build_qr(data, border=2).print_ascii(out=out, invert=invert)
    return out.getvalue()


def save_qr_png(data, path):
    """
    Save a QR code image (PNG, rendered by Pillow through qrcode).

    Args:
        data (str): Payload, normally an otpauth URI
        path (str): Destination; '.png' is appended if missing

    Returns:
        str: The path actually written
    """
    path = os.path.expanduser(path.strip().strip('"').strip("'"))
    if not path.lower().endswith('.png'):
        path += '.png'

    export_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(export_dir, exist_ok=True)

    img = _build_qr(data, border=4).make_image(fill_color="black", back_color="white")
    img.save(path)
    logger.info(f"Saved QR code image to {path}")
    return path
