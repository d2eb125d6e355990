import hmac


class Secret:
    """
    Shared TOTP key held as raw bytes.

    Wraps the key so that it cannot leak through logging, error messages
    or display code by accident:
    - str() and repr() return a placeholder instead of the key
    - equality uses a constant-time comparison
    - the bytes are only reachable through get(), which should be called
      for the duration of a single HMAC computation

    Only the Account Store creates Secrets; the OTP engine borrows them.
    """

    __slots__ = ('_value',)

    def __init__(self, value):
        """
        Args:
            value (bytes): Raw key bytes, must be non-empty
        """
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("Secret value must be bytes")
        if not value:
            raise ValueError("Secret value must not be empty")
        self._value = bytes(value)

    def get(self):
        """
        Get the raw key bytes. USE THIS METHOD SPARINGLY.

        Returns:
            bytes: The key, for cryptographic use only
        """
        return self._value

    def __len__(self):
        return len(self._value)

    def __eq__(self, other):
        if not isinstance(other, Secret):
            return NotImplemented
        return hmac.compare_digest(self._value, other._value)

    def __hash__(self):
        return hash((Secret, len(self._value)))

    def __str__(self):
        return "[SECRET]"

    def __repr__(self):
        return f"Secret(<{len(self._value)} bytes>)"
