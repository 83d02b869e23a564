"""
Client for the For the City Collection+JSON API.

Requests are signed with Hawk credentials, sent once, and their responses are
validated and flattened into plain dictionaries.
"""

import logging
from typing import Optional

from .config import ClientConfig, Credentials
from .query import encode_params
from .resources import Admin, Opportunities, Organizations, Signup
from .results import LIST, ApiResult, interpret
from .signing import check_credentials, sign_request
from .transport import Transport

logger = logging.getLogger(__name__)


class Client:
    """
    API client.

    Example:
        client = Client(ClientConfig(token="id", secret="key"))
        result = client.opportunities.get(1)
        if result.ok:
            print(result.data['href'])
    """

    def __init__(self, config: Optional[ClientConfig] = None, session=None, **options):
        """
        Initialize the client.

        Args:
            config: Client configuration; built from options when omitted
            session: Optional requests.Session for the transport
            **options: ClientConfig fields (token, secret, host, port, algorithm, timeout)

        Raises:
            ConfigurationError: If the configuration or credentials are invalid
        """
        if config is None:
            config = ClientConfig(**options)
        elif options:
            raise TypeError("pass either config or keyword options, not both")

        self.config = config

        credentials = config.credentials
        check_credentials(credentials)
        self._credentials = credentials

        self.transport = Transport(timeout=config.timeout, session=session)

        self.opportunities = Opportunities(self)
        self.organizations = Organizations(self)
        self.signup = Signup(self)
        self.admin = Admin(self)

    @classmethod
    def from_env(cls, environ=None, session=None) -> "Client":
        """Build a client from TOKEN, SECRET, HOST and PORT."""
        return cls(ClientConfig.from_env(environ), session=session)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def rotate_credentials(self, credentials: Credentials):
        """
        Replace the signing credentials.

        Requests already being signed keep the credentials they started with.
        """
        check_credentials(credentials)
        self._credentials = credentials
        logger.info("Rotated credentials to id=%s", credentials.id)

    def url_for(self, path: str, params=None) -> str:
        """Absolute URL for an API path, with an optional query string."""
        url = self.config.base_url + '/' + path.lstrip('/')
        query = encode_params(params)
        if query:
            url += '?' + query
        return url

    def request(self, method: str, path: str, shape: str = LIST,
                body=None, params=None) -> ApiResult:
        """
        Sign, send and interpret one request.

        Args:
            method: HTTP method
            path: API path, e.g. ``/api/opportunities/1``
            shape: Result shape (item, list, template or write)
            body: Optional write body; its keys also make up the Hawk ext
            params: Optional query parameters

        Returns:
            ApiResult carrying response, data and error

        Raises:
            InvalidRequestSpec: If the request cannot be signed
        """
        url = self.url_for(path, params)

        # One read: the whole signing operation uses this snapshot
        credentials = self._credentials
        signed = sign_request(credentials, method, url, payload=body)

        envelope = self.transport.send(signed.method, url, signed.authorization, body)
        result = interpret(envelope, shape)

        logger.debug("%s %s -> %s (ok=%s)", signed.method, url, result.status_code, result.ok)
        return result

    def search(self, params=None) -> ApiResult:
        """
        Search opportunities.

        Args:
            params: Mapping of search fields; list values become ``key[]`` pairs

        Returns:
            ApiResult whose data is the list of matching items
        """
        return self.request('GET', '/api/search', shape=LIST, params=params)

    def close(self):
        """Close HTTP session."""
        self.transport.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
