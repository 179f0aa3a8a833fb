"""
SigV4 request signer for S3-compatible object stores.

The signer is called once per outgoing request attempt with the headers that
attempt will actually send. It performs no I/O.
"""
import logging
import re
import threading
from dataclasses import replace
from typing import BinaryIO, NamedTuple, Optional, Sequence, Tuple, Union
from urllib.parse import urlsplit

from .canonical import SigningRequest, build_canonical_request, canonical_query, canonical_uri
from .credentials import Credentials
from .errors import InvalidSigningInput
from .hashing import Data, payload_hash
from .headers import (
    HeaderInput,
    Headers,
    format_byte_range,
    host_from_uri,
    normalize_headers,
    without_headers,
)
from .provider import parse_provider, scope_from_host
from .signature import SignatureResult, assemble, credential_scope
from .signing_key import DEFAULT_SERVICE, SigningKeyCache
from .timeutil import Timestamp, amz_timestamp, datestamp, utc_timestamp

logger = logging.getLogger(__name__)

ByteRange = Tuple[int, int]
Payload = Union[None, Data, BinaryIO]

_METHOD_RE = re.compile(r'[A-Za-z][A-Za-z-]*')

# Headers left over from an earlier attempt; always replaced.
_STALE_HEADERS = ('authorization', 'x-amz-date', 'x-amz-security-token')


class _Config(NamedTuple):
    credentials: Credentials
    keys: Optional[SigningKeyCache]


def _snapshot(credentials: Optional[Credentials]) -> _Config:
    credentials = credentials or Credentials()
    keys = SigningKeyCache(credentials.secret_key) if credentials.enabled else None
    return _Config(credentials, keys)


class SigV4Signer(object):
    """
    Signs requests with AWS Signature Version 4.

    Keyword arguments:
    credentials -- the Credentials to sign with; None or an empty access key
                   disables signing and ``sign`` returns headers untouched
    service -- the service name of the credential scope (default "s3")
    sign_content_sha256 -- add and sign an X-Amz-Content-SHA256 header
                           carrying the payload hash
    """

    def __init__(
            self,
            credentials: Optional[Credentials] = None,
            service: str = DEFAULT_SERVICE,
            sign_content_sha256: bool = False
    ) -> None:
        self.service = service
        self.sign_content_sha256 = sign_content_sha256
        self._lock = threading.Lock()
        self._config = _snapshot(credentials)

    @classmethod
    def from_provider(
            cls,
            provider: str,
            credentials: Credentials,
            host: Optional[str] = None,
            sign_content_sha256: bool = False
    ) -> 'SigV4Signer':
        """
        Build a signer from a curl-style ``aws:amz[:region[:service]]`` string.

        A missing region or service is taken from ``host`` (a host name or a
        full URI) when it looks like ``<service>.<region>.<domain>``, else
        from the credentials and the "s3" default.
        """
        options = parse_provider(provider)
        region, service = options.region, options.service
        if region is None or service is None:
            if host and '://' in host:
                host = host_from_uri(host)
            host_service, host_region = scope_from_host(host)
            region = region or host_region or credentials.region
            service = service or host_service or DEFAULT_SERVICE
        return cls(replace(credentials, region=region), service, sign_content_sha256)

    @property
    def credentials(self) -> Credentials:
        return self._config.credentials

    @property
    def enabled(self) -> bool:
        return self._config.credentials.enabled

    def configure(self, credentials: Optional[Credentials]) -> None:
        """Replace the credentials used by subsequent ``sign`` calls."""
        config = _snapshot(credentials)
        with self._lock:
            self._config = config
        if not config.credentials.enabled:
            logger.debug("Signing disabled, no access key configured")

    def sign(
            self,
            method: str,
            uri: str,
            headers: Optional[HeaderInput] = None,
            timestamp: Timestamp = None,
            byte_range: Optional[ByteRange] = None,
            payload: Payload = None
    ) -> Headers:
        """
        Return the headers to send with this request attempt.

        When signing is disabled this is the input header set (plus ``Range``
        when ``byte_range`` is given). Otherwise the ``Authorization``,
        ``X-Amz-Date`` and, with a session token, ``X-Amz-Security-Token``
        headers are merged in.
        """
        config = self._config
        if not config.credentials.enabled:
            logger.debug("No access key configured, sending %s %s unsigned", method, uri)
            return self._outgoing_headers(headers, byte_range, drop=())

        outgoing = self._outgoing_headers(headers, byte_range)
        result = self._sign(config, method, uri, outgoing, timestamp, payload)
        outgoing.update(result.as_headers())
        return outgoing

    def signature(
            self,
            method: str,
            uri: str,
            headers: Optional[HeaderInput] = None,
            timestamp: Timestamp = None,
            byte_range: Optional[ByteRange] = None,
            payload: Payload = None
    ) -> Optional[SignatureResult]:
        """Like ``sign`` but returns the SignatureResult, or None when disabled."""
        config = self._config
        if not config.credentials.enabled:
            return None
        outgoing = self._outgoing_headers(headers, byte_range)
        return self._sign(config, method, uri, outgoing, timestamp, payload)

    def build_request(
            self,
            method: str,
            uri: str,
            headers: Optional[HeaderInput] = None,
            timestamp: Timestamp = None,
            byte_range: Optional[ByteRange] = None,
            payload: Payload = None
    ) -> SigningRequest:
        """The normalized SigningRequest a ``sign`` call would hash."""
        outgoing = self._outgoing_headers(headers, byte_range)
        request, _ = self._build(self._config.credentials, method, uri, outgoing, timestamp, payload)
        return request

    def _outgoing_headers(
            self,
            headers: Optional[HeaderInput],
            byte_range: Optional[ByteRange],
            drop: Sequence[str] = _STALE_HEADERS
    ) -> Headers:
        outgoing = without_headers(headers, drop)
        if byte_range is not None:
            start, end = byte_range
            outgoing = without_headers(outgoing, ['range'])
            outgoing['Range'] = format_byte_range(start, end)
        return outgoing

    def _build(
            self,
            credentials: Credentials,
            method: str,
            uri: str,
            outgoing: Headers,
            timestamp: Timestamp,
            payload: Payload
    ) -> Tuple[SigningRequest, Optional[str]]:
        if not isinstance(method, str) or not _METHOD_RE.fullmatch(method):
            raise InvalidSigningInput(f"Invalid HTTP method {method!r}")
        method = method.upper()

        signed = normalize_headers(outgoing)
        if method == 'HEAD' and 'range' in signed:
            raise InvalidSigningInput("A HEAD request must not carry a Range header")
        if 'host' not in signed:
            host = host_from_uri(uri)
            if host is None:
                raise InvalidSigningInput(f"Cannot determine the host for {uri!r}")
            signed['host'] = host

        when = utc_timestamp(timestamp)
        signed['x-amz-date'] = amz_timestamp(when)
        if credentials.token:
            signed['x-amz-security-token'] = credentials.token

        added_content_sha256 = None
        content_sha256 = signed.get('x-amz-content-sha256')
        if content_sha256 is None:
            content_sha256 = payload_hash(payload)
            if self.sign_content_sha256:
                signed['x-amz-content-sha256'] = content_sha256
                added_content_sha256 = content_sha256

        parts = urlsplit(uri)
        request = SigningRequest(
            method=method,
            canonical_uri=canonical_uri(parts.path),
            canonical_query=canonical_query(parts.query),
            headers=signed,
            timestamp=when,
            payload_hash=content_sha256,
        )
        return request, added_content_sha256

    def _sign(
            self,
            config: _Config,
            method: str,
            uri: str,
            outgoing: Headers,
            timestamp: Timestamp,
            payload: Payload
    ) -> SignatureResult:
        credentials = config.credentials
        request, added_content_sha256 = self._build(
            credentials, method, uri, outgoing, timestamp, payload
        )
        canonical = build_canonical_request(request)
        canonical_hash = canonical.hexdigest

        date_stamp = datestamp(request.timestamp)
        scope = credential_scope(date_stamp, credentials.region, self.service)
        logger.debug("Signing %s %s with credential scope %s", request.method, uri, scope)
        signing_key = config.keys.get(date_stamp, credentials.region, self.service)
        return assemble(
            credentials.access_key,
            signing_key,
            request.headers['x-amz-date'],
            scope,
            canonical_hash,
            canonical.signed_headers,
            security_token=credentials.token,
            content_sha256=added_content_sha256,
        )
