"""
SHA-256 and HMAC-SHA256 primitives.

Every digest handed between signing steps is a ``bytes`` object of exactly
32 bytes. Only ``sha256_hex`` and ``hmac_sha256_hex`` produce text.
"""
import functools
import hashlib
import hmac
from typing import BinaryIO, Union

from .errors import CryptoUnavailable, InvalidSigningInput

EMPTY_SHA256_HASH = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

# Read size used when hashing file-like payloads.
PAYLOAD_BUFFER = 1024 * 1024

Data = Union[str, bytes, bytearray, memoryview]


def _to_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)


def _new_sha256():
    try:
        return hashlib.new('sha256')
    except ValueError as exc:
        raise CryptoUnavailable(f"SHA-256 is not available: {exc}") from exc


def sha256_hex(data: Data) -> str:
    """Lower-case hex SHA-256 digest of ``data``."""
    digest = _new_sha256()
    digest.update(_to_bytes(data))
    return digest.hexdigest()


def hmac_sha256(key: bytes, msg: Data) -> bytes:
    """Raw 32-byte HMAC-SHA256 of ``msg`` under ``key``."""
    try:
        return hmac.new(bytes(key), _to_bytes(msg), hashlib.sha256).digest()
    except ValueError as exc:
        raise CryptoUnavailable(f"HMAC-SHA256 is not available: {exc}") from exc


def hmac_sha256_hex(key: bytes, msg: Data) -> str:
    return hmac_sha256(key, msg).hex()


def payload_hash(payload: Union[None, Data, BinaryIO]) -> str:
    """
    Hash a request body for the canonical request.

    ``None`` and empty bodies hash to ``EMPTY_SHA256_HASH``; the literal
    ``UNSIGNED_PAYLOAD`` is returned untouched. Seekable file objects are read
    in ``PAYLOAD_BUFFER`` chunks and rewound to where they started.
    """
    if payload is None:
        return EMPTY_SHA256_HASH
    if isinstance(payload, str) and payload == UNSIGNED_PAYLOAD:
        return UNSIGNED_PAYLOAD
    if hasattr(payload, 'read'):
        try:
            position = payload.tell()
        except OSError as exc:
            raise InvalidSigningInput("File payloads must be seekable") from exc
        digest = _new_sha256()
        read_chunk = functools.partial(payload.read, PAYLOAD_BUFFER)
        for chunk in iter(read_chunk, b''):
            digest.update(chunk)
        payload.seek(position)
        return digest.hexdigest()
    if not payload:
        return EMPTY_SHA256_HASH
    return sha256_hex(payload)
