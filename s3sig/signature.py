"""Signature Assembler: StringToSign, final signature and Authorization header."""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .hashing import hmac_sha256_hex
from .signing_key import V4_TERMINATOR

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'


@dataclass(frozen=True)
class SignatureResult:
    """Headers produced for one request attempt. Do not reuse across attempts."""

    authorization: str
    amz_date: str
    signature: str
    signed_headers: str
    credential_scope: str
    security_token: Optional[str] = None
    content_sha256: Optional[str] = None

    def as_headers(self) -> Dict[str, str]:
        headers = {
            'Authorization': self.authorization,
            'X-Amz-Date': self.amz_date,
        }
        if self.security_token:
            headers['X-Amz-Security-Token'] = self.security_token
        if self.content_sha256:
            headers['X-Amz-Content-SHA256'] = self.content_sha256
        return headers


def credential_scope(date_stamp: str, region: str, service: str) -> str:
    return '/'.join([date_stamp, region, service, V4_TERMINATOR])


def string_to_sign(amz_date: str, scope: str, canonical_request_hash: str) -> str:
    return '\n'.join([ALGORITHM, amz_date, scope, canonical_request_hash])


def compute_signature(signing_key: bytes, to_sign: str) -> str:
    """Lower-case hex HMAC of the StringToSign; the only hex step of the chain."""
    return hmac_sha256_hex(signing_key, to_sign)


def authorization_header(access_key: str, scope: str, signed_headers: str, signature: str) -> str:
    return (
        f'{ALGORITHM} Credential={access_key}/{scope}, '
        f'SignedHeaders={signed_headers}, Signature={signature}'
    )


def assemble(
        access_key: str,
        signing_key: bytes,
        amz_date: str,
        scope: str,
        canonical_request_hash: str,
        signed_headers: str,
        security_token: Optional[str] = None,
        content_sha256: Optional[str] = None
) -> SignatureResult:
    to_sign = string_to_sign(amz_date, scope, canonical_request_hash)
    logger.debug('StringToSign:\n%s', to_sign)
    signature = compute_signature(signing_key, to_sign)
    logger.debug('Signature:\n%s', signature)
    return SignatureResult(
        authorization=authorization_header(access_key, scope, signed_headers, signature),
        amz_date=amz_date,
        signature=signature,
        signed_headers=signed_headers,
        credential_scope=scope,
        security_token=security_token,
        content_sha256=content_sha256,
    )
