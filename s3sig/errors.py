"""Exceptions raised while signing a request."""


class SigningError(Exception):
    """Base class for every error raised by the signer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidSigningInput(SigningError, ValueError):
    """The request handed to the signer cannot produce a valid signature.

    Raised before any network attempt is made, e.g. when the header set lacks
    ``host`` or ``x-amz-date``, the timestamp is malformed or a byte range is
    out of bounds.
    """


class CryptoUnavailable(SigningError, RuntimeError):
    """The SHA-256 / HMAC-SHA256 backend could not be used."""
