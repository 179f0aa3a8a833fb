from dataclasses import dataclass, field
from typing import Optional, Union

from .errors import InvalidSigningInput

DEFAULT_REGION = 'us-east-1'


def _text(value: Union[None, str, bytes]) -> str:
    if value is None:
        return ''
    if isinstance(value, bytes):
        return value.decode('utf-8')
    return value


@dataclass(frozen=True)
class Credentials:
    """
    Already-resolved credentials used to sign requests.

    An empty ``access_key`` means "do not sign". The secret key is held as
    bytes since it only ever feeds HMAC; text is encoded as UTF-8.
    """

    access_key: str = ''
    secret_key: bytes = field(default=b'', repr=False)
    region: str = DEFAULT_REGION
    token: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'access_key', _text(self.access_key))
        secret = self.secret_key
        if secret is None:
            secret = b''
        elif isinstance(secret, str):
            secret = secret.encode('utf-8')
        object.__setattr__(self, 'secret_key', bytes(secret))
        object.__setattr__(self, 'region', _text(self.region) or DEFAULT_REGION)
        object.__setattr__(self, 'token', _text(self.token) or None)

    @property
    def enabled(self) -> bool:
        return bool(self.access_key)

    @classmethod
    def from_userpwd(
            cls,
            userpwd: str,
            region: str = DEFAULT_REGION,
            token: Optional[str] = None
    ) -> 'Credentials':
        """Build credentials from an ``access_key:secret_key`` string."""
        access_key, sep, secret_key = userpwd.partition(':')
        if not sep:
            raise InvalidSigningInput("Expected credentials in the form access_key:secret_key")
        return cls(access_key, secret_key, region, token)
