"""
Account Store

Owns the ordered collection of accounts and their secrets, and is the only
writer of the persisted store.

Features:
- Insertion order is preserved for display
- Account names are unique (case-sensitive); a rejected add leaves the
  store untouched
- Every mutation is persisted as a whole document via an atomic
  write-then-replace, and rolled back in memory if the write fails
- Pluggable backends: FileBackend for the real JSON file, MemoryBackend
  for tests

Persisted format (JSON):

    {"version": 1,
     "accounts": [{"name": "...", "secret": "<Base32>", "digits": 6,
                   "period": 30, "algorithm": "SHA1"}]}
"""

import json
import logging

from .. import config
from ..totp import codec
from ..totp.engine import OtpParams
from ..exceptions import (
    AccountNotFound,
    CorruptStore,
    DuplicateAccountName,
    InvalidParams,
    PersistenceFailure,
    TotpCliError,
)
from ..utils.file_utils import atomic_write
from .accounts import Account

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class FileBackend:
    """Backing state in a JSON file on disk."""

    def __init__(self, path):
        self.path = path

    def read(self):
        """
        Returns:
            str or None: File contents, None when the file does not exist yet
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptStore(self.path, "file is not valid UTF-8 text") from e
        except OSError as e:
            raise PersistenceFailure(self.path, e.strerror or str(e)) from e

    def write(self, text):
        try:
            atomic_write(self.path, text)
        except OSError as e:
            raise PersistenceFailure(self.path, e.strerror or str(e)) from e

    def __repr__(self):
        return f"FileBackend({self.path!r})"


class MemoryBackend:
    """In-memory backing state holding the same serialized text as a file."""

    path = '<memory>'

    def __init__(self, text=None):
        self.text = text
        self.writes = 0

    def read(self):
        return self.text

    def write(self, text):
        self.text = text
        self.writes += 1

    def __repr__(self):
        return "MemoryBackend()"


def dump_accounts(accounts):
    """Serialize accounts to the persisted JSON document."""
    document = {
        'version': STORE_VERSION,
        'accounts': [account.to_record() for account in accounts],
    }
    return json.dumps(document, indent=2) + '\n'


def parse_accounts(text, path='<memory>', strict=True):
    """
    Parse a persisted JSON document into accounts.

    Args:
        text (str): Document text
        path (str): Source location for error messages
        strict (bool): Raise on the first invalid record; when False, invalid
            records are skipped and returned as errors

    Returns:
        tuple: (list of Account, list of TotpCliError for skipped records)

    Raises:
        CorruptStore: the document itself cannot be used
        InvalidSecretEncoding, InvalidParams, UnsupportedHashAlgorithm:
            an individual record is invalid (strict mode)
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptStore(path, f"not valid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(document, dict) or not isinstance(document.get('accounts'), list):
        raise CorruptStore(path, "expected an object with an 'accounts' list")
    if document.get('version') != STORE_VERSION:
        raise CorruptStore(path, f"unsupported store version {document.get('version')!r}")

    accounts = []
    skipped = []
    seen = set()
    for index, record in enumerate(document['accounts']):
        try:
            account = Account.from_record(record, index=index, path=path)
            if account.name in seen:
                raise CorruptStore(path, f"duplicate account name '{account.name}'", record_index=index)
        except TotpCliError as e:
            if strict:
                raise
            logger.info(f"Skipping invalid record {index} in {path}: {e}")
            skipped.append(e)
            continue
        seen.add(account.name)
        accounts.append(account)
    return accounts, skipped


class AccountStore:
    """
    Ordered, name-unique collection of accounts bound to a backend.

    Construct it once per command with load() (or open() for the default
    file) and pass it explicitly to whatever needs it.
    """

    def __init__(self, backend, accounts=None):
        self.backend = backend
        self._accounts = list(accounts or [])
        self.load_errors = []

    @classmethod
    def load(cls, backend, strict=True):
        """
        Read the persisted store.

        Args:
            backend: FileBackend or MemoryBackend
            strict (bool): Fail on the first invalid record (default). With
                strict=False invalid records are skipped and kept in
                store.load_errors for the caller to report.

        Returns:
            AccountStore
        """
        text = backend.read()
        if text is None:
            logger.debug(f"No account store at {backend.path}, starting empty")
            return cls(backend)

        accounts, skipped = parse_accounts(text, path=backend.path, strict=strict)
        store = cls(backend, accounts)
        store.load_errors = skipped
        logger.info(f"Loaded {len(accounts)} account(s) from {backend.path}")
        return store

    @classmethod
    def open(cls, path=None, strict=True):
        """Load the store from a file, defaulting to config.get_store_path()."""
        return cls.load(FileBackend(path or config.get_store_path()), strict=strict)

    def save(self):
        """
        Persist the full store atomically.

        Raises:
            PersistenceFailure: the backend could not be written
        """
        self.backend.write(dump_accounts(self._accounts))
        logger.info(f"Saved {len(self._accounts)} account(s) to {self.backend.path}")

    def add(self, name, secret_text, params=None):
        """
        Add a new account and persist the store.

        Args:
            name (str): Unique account name (case-sensitive)
            secret_text (str): Base32 secret as entered by the user
            params (OtpParams): Defaults to 6 digits / 30 s / SHA1

        Returns:
            Account: The stored account

        Raises:
            DuplicateAccountName: name already present
            InvalidSecretEncoding: secret_text is not valid Base32
            InvalidParams: empty name or non-positive digits/period
            UnsupportedHashAlgorithm: unknown algorithm
            PersistenceFailure: the store could not be written; the new
                account is not kept
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidParams("account name must not be empty")
        if name in self:
            raise DuplicateAccountName(name)

        secret = codec.decode(secret_text)
        params = (params or OtpParams()).validate()
        account = Account(name, secret, params)

        if account.is_weak:
            logger.info(f"Secret for '{name}' is only {len(secret)} bytes; at least {config.WEAK_SECRET_BYTES} is recommended")

        self._accounts.append(account)
        try:
            self.save()
        except TotpCliError:
            self._accounts.pop()
            raise
        logger.info(f"Added account '{name}' ({params.digits} digits, {params.period}s, {params.algorithm.value})")
        return account

    def delete(self, name):
        """
        Remove an account and persist the store.

        Raises:
            AccountNotFound: no account with that exact name
            PersistenceFailure: the store could not be written; the account
                is kept
        """
        for index, account in enumerate(self._accounts):
            if account.name == name:
                break
        else:
            raise AccountNotFound(name)

        del self._accounts[index]
        try:
            self.save()
        except TotpCliError:
            self._accounts.insert(index, account)
            raise
        logger.info(f"Deleted account '{name}'")

    def get(self, name):
        for account in self._accounts:
            if account.name == name:
                return account
        raise AccountNotFound(name)

    def list(self):
        """
        Accounts in insertion order.

        Returns:
            tuple: Read-only snapshot of the accounts
        """
        return tuple(self._accounts)

    def names(self):
        return [account.name for account in self._accounts]

    def __contains__(self, name):
        return any(account.name == name for account in self._accounts)

    def __iter__(self):
        return iter(self.list())

    def __len__(self):
        return len(self._accounts)

    def __eq__(self, other):
        if not isinstance(other, AccountStore):
            return NotImplemented
        return self._accounts == other._accounts

    def __repr__(self):
        return f"AccountStore({self.backend!r}, {len(self)} accounts)"
