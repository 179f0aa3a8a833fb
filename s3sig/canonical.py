"""
Canonical Request Builder.

See https://docs.aws.amazon.com/IAM/latest/UserGuide/create-signed-request.html
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict
from urllib.parse import quote, unquote

from .errors import InvalidSigningInput
from .hashing import EMPTY_SHA256_HASH, sha256_hex

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ('host', 'x-amz-date')

# Header values that must not reach the logs.
REDACTED_HEADERS = frozenset(['x-amz-security-token'])

# quote() always leaves letters, digits and '_.-~' alone.
_UNRESERVED = '-_.~'


@dataclass(frozen=True)
class SigningRequest:
    """One request attempt, already normalized; never reused across attempts."""

    method: str
    canonical_uri: str
    canonical_query: str
    headers: Dict[str, str]
    timestamp: datetime
    payload_hash: str = EMPTY_SHA256_HASH


@dataclass(frozen=True)
class CanonicalRequest:
    text: str
    signed_headers: str = field(default='')

    @property
    def hexdigest(self) -> str:
        return sha256_hex(self.text)


def canonical_uri(path: str) -> str:
    if not path:
        return '/'
    return quote(unquote(path), safe='/' + _UNRESERVED)


def canonical_query(query: str) -> str:
    if not query:
        return ''
    pairs = []
    for item in query.split('&'):
        if not item:
            continue
        name, _, value = item.partition('=')
        pairs.append((
            quote(unquote(name), safe=_UNRESERVED),
            quote(unquote(value), safe=_UNRESERVED),
        ))
    return '&'.join(f'{name}={value}' for name, value in sorted(pairs))


def _redacted(text: str) -> str:
    lines = []
    for line in text.split('\n'):
        name, sep, _ = line.partition(':')
        if sep and name in REDACTED_HEADERS:
            line = f'{name}:<redacted>'
        lines.append(line)
    return '\n'.join(lines)


def signed_header_names(headers: Dict[str, str]) -> str:
    return ';'.join(sorted(headers))


def build_canonical_request(request: SigningRequest) -> CanonicalRequest:
    """
    Render ``request`` in canonical form.

    Header names must already be lower-case and values trimmed. ``host`` and
    ``x-amz-date`` are mandatory.
    """
    missing = [name for name in REQUIRED_HEADERS if name not in request.headers]
    if missing:
        raise InvalidSigningInput(f"Header set is missing {', '.join(missing)}")

    names = sorted(request.headers)
    canonical_headers = ''.join(f'{name}:{request.headers[name]}\n' for name in names)
    signed_headers = signed_header_names(request.headers)
    text = '\n'.join([
        request.method,
        request.canonical_uri or '/',
        request.canonical_query,
        canonical_headers,
        signed_headers,
        request.payload_hash,
    ])
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug('CanonicalRequest:\n%s', _redacted(text))
    return CanonicalRequest(text, signed_headers)
