"""
Signing key derivation.

    kDate    = HMAC("AWS4" + secret, date)
    kRegion  = HMAC(kDate, region)
    kService = HMAC(kRegion, service)
    kSigning = HMAC(kService, "aws4_request")

Every intermediate stays raw bytes and is fed as the key of the next step.
"""
import threading
from typing import NamedTuple, Optional, Tuple, Union

from .hashing import hmac_sha256

V4_TERMINATOR = 'aws4_request'
DEFAULT_SERVICE = 's3'


class KeyChain(NamedTuple):
    k_date: bytes
    k_region: bytes
    k_service: bytes
    k_signing: bytes


def _secret_bytes(secret_key: Union[str, bytes]) -> bytes:
    if isinstance(secret_key, str):
        return secret_key.encode('utf-8')
    return bytes(secret_key)


def derive_key_chain(
        secret_key: Union[str, bytes],
        date_stamp: str,
        region: str,
        service: str = DEFAULT_SERVICE
) -> KeyChain:
    k_date = hmac_sha256(b'AWS4' + _secret_bytes(secret_key), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    k_signing = hmac_sha256(k_service, V4_TERMINATOR)
    return KeyChain(k_date, k_region, k_service, k_signing)


def derive_signing_key(
        secret_key: Union[str, bytes],
        date_stamp: str,
        region: str,
        service: str = DEFAULT_SERVICE
) -> bytes:
    """Raw 32-byte signing key for one day, region and service."""
    return derive_key_chain(secret_key, date_stamp, region, service).k_signing


class SigningKeyCache:
    """
    Holds the most recently derived signing key.

    The slot is keyed by ``(date_stamp, region, service)`` so a UTC date
    rollover derives a fresh key. A cache belongs to one secret key; the
    signer drops it whenever credentials are reconfigured.
    """

    def __init__(self, secret_key: Union[str, bytes]) -> None:
        self._secret_key = _secret_bytes(secret_key)
        self._lock = threading.Lock()
        self._scope: Optional[Tuple[str, str, str]] = None
        self._key: Optional[bytes] = None

    def get(self, date_stamp: str, region: str, service: str = DEFAULT_SERVICE) -> bytes:
        scope = (date_stamp, region, service)
        with self._lock:
            if self._scope == scope and self._key is not None:
                return self._key
        key = derive_signing_key(self._secret_key, date_stamp, region, service)
        with self._lock:
            self._scope = scope
            self._key = key
        return key

    def clear(self) -> None:
        with self._lock:
            self._scope = None
            self._key = None
