"""
HMAC-SHA256 signing

Shared by guest feedback links and billing webhook verification. Every
comparison goes through ``HMAC.verify`` so it runs in constant time.
"""

from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from surf_retreats.exceptions import ConfigError

BytesLike = Union[str, bytes]


def _to_bytes(value: BytesLike) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


class HmacSigner:
    """
    HMAC-SHA256 signer bound to one secret

    Example:
        >>> signer = HmacSigner("s3cret")
        >>> digest = signer.sign_hex("booking-42")
        >>> signer.verify_hex("booking-42", digest)
        True
    """

    def __init__(self, secret: BytesLike) -> None:
        if not secret:
            raise ConfigError("HMAC secret must not be empty", code="CONFIG_MISSING_SECRET")
        self._key = _to_bytes(secret)

    def _new(self) -> hmac.HMAC:
        return hmac.HMAC(self._key, hashes.SHA256())

    def sign(self, message: BytesLike) -> bytes:
        """Raw HMAC-SHA256 digest of ``message``"""
        h = self._new()
        h.update(_to_bytes(message))
        return h.finalize()

    def sign_hex(self, message: BytesLike) -> str:
        """Lowercase hex HMAC-SHA256 digest of ``message``"""
        return self.sign(message).hex()

    def verify(self, message: BytesLike, signature: bytes) -> bool:
        """Constant-time check of a raw digest"""
        h = self._new()
        h.update(_to_bytes(message))
        try:
            h.verify(signature)
        except InvalidSignature:
            return False
        return True

    def verify_hex(self, message: BytesLike, signature: str) -> bool:
        """Constant-time check of a hex digest; malformed hex never matches"""
        try:
            raw = bytes.fromhex(signature)
        except ValueError:
            return False
        return self.verify(message, raw)
