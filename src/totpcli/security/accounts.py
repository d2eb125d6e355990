"""
Account records

An Account ties a unique name to a Secret and its OTP parameters. Accounts
are created by the store's add operation and never edited in place.
"""

from dataclasses import dataclass

from .. import config
from ..totp import codec
from ..totp.engine import OtpParams, HashAlgorithm
from ..exceptions import CorruptStore, TotpCliError
from .secret import Secret

RECORD_FIELDS = ('name', 'secret', 'digits', 'period', 'algorithm')


@dataclass(frozen=True)
class Account:
    name: str
    secret: Secret
    params: OtpParams = OtpParams()

    @property
    def digits(self):
        return self.params.digits

    @property
    def period(self):
        return self.params.period

    @property
    def algorithm(self):
        return self.params.algorithm

    @property
    def is_weak(self):
        """True when the secret is shorter than the recommended 80 bits."""
        return len(self.secret) < config.WEAK_SECRET_BYTES

    def to_record(self):
        """
        Serializable form of the account.

        The secret is stored as Base32 text so the file stays readable and
        portable; the algorithm is stored as its tag.

        Returns:
            dict: name, secret, digits, period, algorithm
        """
        algorithm = self.params.algorithm
        return {
            'name': self.name,
            'secret': codec.encode(self.secret),
            'digits': self.params.digits,
            'period': self.params.period,
            'algorithm': algorithm.value if isinstance(algorithm, HashAlgorithm) else algorithm,
        }

    @classmethod
    def from_record(cls, record, index=None, path=None):
        """
        Rebuild an Account from a persisted record, validating every field.

        Args:
            record (dict): One entry of the store's account list
            index (int): Position of the record, attached to raised errors
            path (str): Store location, used in CorruptStore messages

        Raises:
            CorruptStore: missing or mistyped fields
            InvalidSecretEncoding: secret is not valid Base32
            InvalidParams: digits/period not positive integers
            UnsupportedHashAlgorithm: unknown algorithm tag
        """
        if not isinstance(record, dict):
            raise CorruptStore(path, f"record {index} is not an object", record_index=index)

        missing = [field for field in RECORD_FIELDS if field not in record]
        if missing:
            raise CorruptStore(path, f"record {index} is missing {', '.join(missing)}", record_index=index)

        name = record['name']
        if not isinstance(name, str) or not name:
            raise CorruptStore(path, f"record {index} has an invalid name", record_index=index)
        if not isinstance(record['secret'], str):
            raise CorruptStore(path, f"record {index} has a non-text secret", record_index=index)

        try:
            secret = codec.decode(record['secret'])
            params = OtpParams(record['digits'], record['period'], record['algorithm']).validate()
        except TotpCliError as e:
            e.record_index = index
            raise
        return cls(name, secret, params)
