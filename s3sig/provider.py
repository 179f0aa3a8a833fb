"""
Parsing of the curl-style ``provider1[:provider2[:region[:service]]]`` option.

``aws:amz:us-east-1:s3`` selects the AWS4-HMAC-SHA256 algorithm with
``X-Amz-*`` headers, region ``us-east-1`` and service ``s3``.
"""
import ipaddress
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidSigningInput

SUPPORTED_PROVIDERS = ('aws', 'amz')


@dataclass(frozen=True)
class ProviderOptions:
    provider1: str
    provider2: str
    region: Optional[str] = None
    service: Optional[str] = None


def parse_provider(value: str) -> ProviderOptions:
    parts = value.split(':')
    if not parts[0] or len(parts) > 4 or any(not p for p in parts[1:]):
        raise InvalidSigningInput(f"Malformed provider string {value!r}")
    provider1 = parts[0].lower()
    provider2 = parts[1].lower() if len(parts) > 1 else 'amz'
    if (provider1, provider2) != SUPPORTED_PROVIDERS:
        raise InvalidSigningInput(
            f"Unsupported provider {provider1}:{provider2}, only aws:amz is supported"
        )
    region = parts[2] if len(parts) > 2 else None
    service = parts[3] if len(parts) > 3 else None
    return ProviderOptions(provider1, provider2, region, service)


def _is_ip_address(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname.strip('[]'))
    except ValueError:
        return False
    return True


def scope_from_host(host: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Guess ``(service, region)`` from a ``<service>.<region>.<domain>`` host.

    Returns ``(None, None)`` for IP literals and hosts with fewer than three
    labels.
    """
    if not host:
        return None, None
    if host.startswith('['):
        return None, None
    hostname = host.rsplit(':', 1)[0] if host.count(':') == 1 else host
    if _is_ip_address(hostname):
        return None, None
    labels = hostname.split('.')
    if len(labels) < 3 or not labels[0] or not labels[1]:
        return None, None
    return labels[0], labels[1]
