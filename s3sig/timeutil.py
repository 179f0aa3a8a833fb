import re
from datetime import datetime, timezone
from typing import Union

from .errors import InvalidSigningInput

SIGV4_TIMESTAMP = '%Y%m%dT%H%M%SZ'
SIGV4_DATESTAMP = '%Y%m%d'

_AMZ_TIMESTAMP_RE = re.compile(r'\d{8}T\d{6}Z')

Timestamp = Union[None, datetime, str]


def utc_timestamp(value: Timestamp = None) -> datetime:
    """
    Normalize ``value`` to an aware UTC datetime with second precision.

    ``None`` means now. Naive datetimes are taken to already be in UTC and
    strings must use the ``YYYYMMDDTHHMMSSZ`` form.
    """
    if value is None:
        value = datetime.now(timezone.utc)
    elif isinstance(value, str):
        value = parse_amz_timestamp(value)
    elif not isinstance(value, datetime):
        raise InvalidSigningInput(f"Unsupported timestamp type: {type(value).__name__}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)


def parse_amz_timestamp(value: str) -> datetime:
    message = f"Malformed timestamp {value!r}, expected YYYYMMDDTHHMMSSZ"
    if not _AMZ_TIMESTAMP_RE.fullmatch(value):
        raise InvalidSigningInput(message)
    try:
        parsed = datetime.strptime(value, SIGV4_TIMESTAMP)
    except ValueError as exc:
        raise InvalidSigningInput(message) from exc
    return parsed.replace(tzinfo=timezone.utc)


def amz_timestamp(value: Timestamp = None) -> str:
    """Timestamp in the ``YYYYMMDDTHHMMSSZ`` form used by ``X-Amz-Date``."""
    return utc_timestamp(value).strftime(SIGV4_TIMESTAMP)


def datestamp(value: Timestamp = None) -> str:
    return utc_timestamp(value).strftime(SIGV4_DATESTAMP)
