"""
HTTP transport for signed Collection+JSON requests.

The transport performs exactly one attempt per call and always returns a
``TransportResponse``; network failures are reported in ``transport_error``
instead of being raised.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .constants import (
    API_VERSION,
    DEFAULT_CONFIG,
    HEADER_ACCEPT,
    HEADER_API_VERSION,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    MEDIA_TYPE
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """Uniform envelope for one HTTP round trip."""
    status_code: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    raw_body: Optional[str] = None
    transport_error: Optional[requests.RequestException] = None
    response: Optional[requests.Response] = None


class Transport:
    """
    Issues signed requests over a requests session.

    No retries and no caching: retry policy belongs to the caller.
    """

    def __init__(self, timeout: float = DEFAULT_CONFIG['timeout'], session=None):
        """
        Args:
            timeout: HTTP timeout in seconds
            session: Optional pre-built requests.Session
        """
        if timeout is None or timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _prepare_body(self, body: Any) -> Optional[bytes]:
        """Encode a request body for sending."""
        if body is None:
            return None
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode('utf-8')
        if isinstance(body, Mapping):
            return json.dumps(body, separators=(',', ':'), default=str).encode('utf-8')
        return str(body).encode('utf-8')

    def send(self, method: str, url: str, authorization: str, body: Any = None) -> TransportResponse:
        """
        Perform one HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL
            authorization: Authorization header value
            body: Optional write body (mapping, str or bytes)

        Returns:
            TransportResponse; transport_error is set when no response was obtained
        """
        headers = {
            HEADER_AUTHORIZATION: authorization,
            HEADER_API_VERSION: API_VERSION,
            HEADER_ACCEPT: MEDIA_TYPE,
        }

        data = self._prepare_body(body)
        if data is not None:
            headers[HEADER_CONTENT_TYPE] = MEDIA_TYPE

        logger.debug("Dispatching %s %s", method, url)

        try:
            response = self.session.request(
                method, url, headers=headers, data=data, timeout=self.timeout,
                allow_redirects=False
            )
        except requests.RequestException as e:
            logger.warning("HTTP request %s %s failed: %s", method, url, e)
            return TransportResponse(transport_error=e)

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            raw_body=response.text,
            response=response
        )

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
