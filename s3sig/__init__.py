"""
AWS Signature Version 4 - request signer for S3-compatible object stores

This package produces the Authorization, X-Amz-Date and X-Amz-Security-Token
headers for HEAD/GET (and body-carrying) requests without depending on
botocore or any HTTP client.
"""
import logging

from .credentials import Credentials
from .errors import CryptoUnavailable, InvalidSigningInput, SigningError
from .hashing import EMPTY_SHA256_HASH, UNSIGNED_PAYLOAD
from .headers import Headers
from .signature import SignatureResult
from .sigv4 import SigV4Signer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "SigV4Signer",
    "Credentials",
    "SignatureResult",
    "Headers",
    "EMPTY_SHA256_HASH",
    "UNSIGNED_PAYLOAD",
    "SigningError",
    "InvalidSigningInput",
    "CryptoUnavailable",
]
