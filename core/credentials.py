"""Decoding of the Basic authentication header that carries target-platform credentials."""
import base64
import binascii
from dataclasses import dataclass, field
from typing import Optional

BASIC_PREFIX = "Basic "
USAGE_EXAMPLE = "Authorization: Basic " + base64.b64encode(b"username:password").decode("ascii")


class AuthenticationRequired(Exception):
    """No usable Basic Authorization header on the request."""

    error = "Basic Authentication required"


class InvalidCredentials(AuthenticationRequired):
    """The header decoded, but not into a non-empty username and password."""

    error = "Invalid Basic Auth format"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


def parse_basic_auth(header: Optional[str]) -> Credentials:
    if not header or not header.startswith(BASIC_PREFIX):
        raise AuthenticationRequired()

    encoded = header[len(BASIC_PREFIX):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidCredentials() from exc

    # RFC 7617: the user-id cannot contain a colon, the password can.
    username, _, password = decoded.partition(":")
    if not username or not password:
        raise InvalidCredentials()
    return Credentials(username=username, password=password)
