"""
Hawk request signing.

This module builds the normalized string a Hawk verifier recomputes
(``canonicalize``), the extension string sent along with write requests
(``build_ext``) and the ``Authorization`` header value (``sign_request``).
"""

import base64
import datetime
import hmac
import json
import logging
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

from .config import Credentials
from .constants import (
    DEFAULT_PORTS,
    HAWK_HEADER_VERSION,
    HAWK_SCHEME,
    SUPPORTED_ALGORITHMS
)
from .exceptions import (
    InvalidRequestSpec,
    MissingCredentials,
    UnknownAlgorithm
)

logger = logging.getLogger(__name__)

# Characters a Hawk header attribute value may carry
_HEADER_ATTRIBUTE = re.compile(r'^[ \w!#$%&\'()*+,\-./:;<=>?@\[\]^`{|}~"\\]*$', re.ASCII)


@dataclass(frozen=True)
class SignedRequest:
    """A request signed once; never reuse it for a second call."""
    method: str
    url: str
    timestamp: int
    nonce: str
    ext: Optional[str]
    mac: str
    authorization: str


def _ext_value(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(',', ':'), sort_keys=True, default=str)
    return str(value)


def build_ext(payload: Optional[Mapping]) -> Optional[str]:
    """
    Render a write payload as the Hawk ``ext`` string.

    The format is ``{name: 'value', other: 'value'}`` in the payload's key
    order. Only one level is encoded: nested values are written as compact
    JSON text inside the quotes, and quotes inside values are not escaped.
    The server expects exactly this shape, so it must not be replaced by
    general JSON.

    Args:
        payload: Mapping sent as the request body, or None

    Returns:
        The ext string, or None when there is no payload
    """
    if payload is None:
        return None

    if not isinstance(payload, Mapping):
        raise InvalidRequestSpec(
            f"ext payload must be a mapping, not {type(payload).__name__}"
        )

    pairs = [f"{name}: '{_ext_value(value)}'" for name, value in payload.items()]
    return '{' + ', '.join(pairs) + '}'


def _escape_ext(ext: str) -> str:
    return ext.replace('\\', '\\\\').replace('\n', '\\n')


def _escape_header_attribute(value: str) -> str:
    if not _HEADER_ATTRIBUTE.match(value):
        raise InvalidRequestSpec("ext contains characters not allowed in a header attribute")
    return value.replace('\\', '\\\\').replace('"', '\\"')


def canonicalize(method: str, url: str, timestamp: int, nonce: str,
                 ext: Optional[str] = None) -> str:
    """
    Build the Hawk normalized string for a request.

    Format::

        hawk.1.header
        <timestamp>
        <nonce>
        <METHOD>
        <path?query>
        <host>
        <port>
        <payload hash, always empty here>
        <ext>

    Each line is newline terminated.

    Raises:
        InvalidRequestSpec: If method or url is empty, or url is not absolute
    """
    if not method:
        raise InvalidRequestSpec("method cannot be empty")
    if not url:
        raise InvalidRequestSpec("url cannot be empty")

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise InvalidRequestSpec(f"url must be absolute: {url!r}")

    try:
        port = parts.port or DEFAULT_PORTS.get(parts.scheme.lower())
    except ValueError:
        raise InvalidRequestSpec(f"url has an invalid port: {url!r}")
    if port is None:
        raise InvalidRequestSpec(f"no default port for scheme {parts.scheme!r}")

    resource = parts.path or '/'
    if parts.query:
        resource += '?' + parts.query

    lines = [
        f"hawk.{HAWK_HEADER_VERSION}.header",
        str(timestamp),
        nonce,
        method.upper(),
        resource,
        parts.hostname.lower(),
        str(port),
        '',
        _escape_ext(ext) if ext else '',
    ]
    return '\n'.join(lines) + '\n'


def compute_mac(credentials: Credentials, normalized: str) -> str:
    """Base64 HMAC of the normalized string keyed by the credentials."""
    digestmod = SUPPORTED_ALGORITHMS[credentials.algorithm]
    key = credentials.key
    if isinstance(key, str):
        key = key.encode('utf-8')

    mac = hmac.new(key, normalized.encode('utf-8'), digestmod)
    return base64.b64encode(mac.digest()).decode('ascii')


def check_credentials(credentials: Optional[Credentials]):
    """
    Raises:
        MissingCredentials: If credentials, id or key is absent
        UnknownAlgorithm: If the algorithm is not supported
    """
    if credentials is None:
        raise MissingCredentials("credentials are required")
    if not credentials.id:
        raise MissingCredentials("credentials id cannot be empty")
    if not credentials.key:
        raise MissingCredentials("credentials key cannot be empty")
    if credentials.algorithm not in SUPPORTED_ALGORITHMS:
        raise UnknownAlgorithm(f"Unknown algorithm: {credentials.algorithm!r}")


def sign_request(credentials: Credentials, method: str, url: str,
                 payload: Optional[Mapping] = None,
                 timestamp: Optional[int] = None,
                 nonce: Optional[str] = None) -> SignedRequest:
    """
    Sign a request and build its Authorization header.

    Args:
        credentials: Credentials snapshot used for the whole operation
        method: HTTP method
        url: Absolute request URL
        payload: Write payload, rendered into ext when present
        timestamp: Unix seconds; a fresh one is generated when omitted
        nonce: Request nonce; a fresh UUID4 is generated when omitted

    Returns:
        SignedRequest holding the header value

    Raises:
        MissingCredentials, UnknownAlgorithm, InvalidRequestSpec
    """
    check_credentials(credentials)

    if timestamp is None:
        timestamp = int(datetime.datetime.now(datetime.timezone.utc).timestamp())
    if nonce is None:
        nonce = str(uuid.uuid4())

    ext = build_ext(payload)
    normalized = canonicalize(method, url, timestamp, nonce, ext)
    mac = compute_mac(credentials, normalized)

    header = f'{HAWK_SCHEME} id="{credentials.id}", ts="{timestamp}", nonce="{nonce}"'
    if ext:
        header += f', ext="{_escape_header_attribute(ext)}"'
    header += f', mac="{mac}"'

    logger.debug("Signed %s %s as id=%s ts=%s nonce=%s", method.upper(), url,
                 credentials.id, timestamp, nonce)

    return SignedRequest(
        method=method.upper(),
        url=url,
        timestamp=timestamp,
        nonce=nonce,
        ext=ext,
        mac=mac,
        authorization=header
    )
