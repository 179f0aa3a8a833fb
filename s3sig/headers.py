"""
Header handling for the canonical request.

Header sets arrive either as a mapping or as a sequence of ``(name, value)``
pairs. Names are matched case-insensitively everywhere.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

from .errors import InvalidSigningInput

Headers = Dict[str, str]
HeaderInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

# Headers that are sent but never signed; proxies and clients rewrite them.
UNSIGNED_HEADERS = frozenset([
    'authorization',
    'expect',
    'transfer-encoding',
    'user-agent',
    'x-amzn-trace-id',
])

_DEFAULT_PORTS = {'http': 80, 'https': 443}


def header_items(headers: Optional[HeaderInput]) -> List[Tuple[str, str]]:
    if not headers:
        return []
    if isinstance(headers, Mapping):
        return list(headers.items())
    return [(name, value) for name, value in headers]


def without_headers(headers: Optional[HeaderInput], names: Iterable[str]) -> Headers:
    """
    Copy of ``headers`` minus every header in ``names`` (any case).

    A name given more than once is combined into a single header under its
    first spelling, the trimmed values joined with ``,`` in order.
    """
    dropped = {n.lower() for n in names}
    copied: Headers = {}
    spelling: Dict[str, str] = {}
    for name, value in header_items(headers):
        lname = name.lower()
        if lname in dropped:
            continue
        if lname in spelling:
            first = spelling[lname]
            copied[first] = str(copied[first]).strip() + ',' + str(value).strip()
        else:
            spelling[lname] = name
            copied[name] = value
    return copied


def normalize_headers(headers: Optional[HeaderInput]) -> Headers:
    """
    Lower-case names, trim values, drop unsigned headers.

    Values are trimmed of leading and trailing whitespace only. Repeated names
    are joined with ``,`` in the order they were given.
    """
    normalized: Headers = {}
    for name, value in header_items(headers):
        lname = name.strip().lower()
        if not lname:
            raise InvalidSigningInput("Header names must not be empty")
        if lname in UNSIGNED_HEADERS:
            continue
        value = str(value).strip()
        if lname in normalized:
            normalized[lname] = normalized[lname] + ',' + value
        else:
            normalized[lname] = value
    return normalized


def format_byte_range(start: int, end: int) -> str:
    """Inclusive byte range in the ``bytes=<start>-<end>`` form."""
    if not all(isinstance(b, int) and not isinstance(b, bool) for b in (start, end)):
        raise InvalidSigningInput("Byte range bounds must be integers")
    if start < 0 or end < start:
        raise InvalidSigningInput(f"Invalid byte range {start}-{end}")
    return f'bytes={start}-{end}'


def host_from_uri(uri: str) -> Optional[str]:
    """
    Value for the ``host`` header derived from ``uri``.

    User info is dropped, the host is lower-cased and the port is kept unless
    it is the default for the scheme. Returns None for URIs without an
    authority.
    """
    parts = urlsplit(uri)
    if not parts.hostname:
        return None
    host = parts.hostname
    if ':' in host:
        # IPv6 literal
        host = f'[{host}]'
    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidSigningInput(f"Invalid port in {uri!r}") from exc
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f'{host}:{port}'
    return host
