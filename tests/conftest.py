import pytest

from totpcli.security.secret import Secret
from totpcli.security.account_store import AccountStore, MemoryBackend

# RFC 6238 Appendix B seeds, one per hash function
RFC_SEED_SHA1 = b"12345678901234567890"
RFC_SEED_SHA256 = b"12345678901234567890123456789012"
RFC_SEED_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

RFC_SECRET_BASE32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
DEMO_SECRET = "JBSWY3DPEHPK3PXP"


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def rfc_secret():
    return Secret(RFC_SEED_SHA1)


@pytest.fixture
def memory_store():
    return AccountStore(MemoryBackend())


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "accounts.json")


@pytest.fixture
def fake_clock():
    return FakeClock(1000.25)
