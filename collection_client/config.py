"""
Client configuration and Hawk credentials.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Union

from .constants import DEFAULT_CONFIG
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Credentials:
    """
    Hawk credentials.

    Instances are immutable; rotating credentials means replacing the whole
    object, so a signing operation holding a reference always sees one
    consistent id/key/algorithm triple.
    """
    id: Optional[str]
    key: Optional[Union[str, bytes]] = field(repr=False)
    algorithm: str = DEFAULT_CONFIG['algorithm']


@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration consumed by the client.

    Args:
        token: Hawk credentials id
        secret: Hawk credentials key
        host: Scheme and host of the API server, without port
        port: API server port
        algorithm: MAC algorithm name (sha1 or sha256)
        timeout: HTTP timeout in seconds
    """
    token: Optional[str]
    secret: Optional[Union[str, bytes]] = field(repr=False)
    host: str = DEFAULT_CONFIG['host']
    port: int = DEFAULT_CONFIG['port']
    algorithm: str = DEFAULT_CONFIG['algorithm']
    timeout: float = DEFAULT_CONFIG['timeout']

    def __post_init__(self):
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        if int(self.port) <= 0:
            raise ConfigurationError("port must be positive")

        if not self.host:
            raise ConfigurationError("host cannot be empty")

    @classmethod
    def from_env(cls, environ=None) -> "ClientConfig":
        """
        Build a configuration from TOKEN, SECRET, HOST, PORT and ALGORITHM.

        A HOST without a scheme is assumed to be plain http.
        """
        environ = os.environ if environ is None else environ

        kwargs = {
            'token': environ.get('TOKEN'),
            'secret': environ.get('SECRET'),
        }

        host = environ.get('HOST')
        if host:
            if '://' not in host:
                host = 'http://' + host
            kwargs['host'] = host

        port = environ.get('PORT')
        if port:
            try:
                kwargs['port'] = int(port)
            except ValueError:
                raise ConfigurationError(f"PORT is not a number: {port!r}")

        algorithm = environ.get('ALGORITHM')
        if algorithm:
            kwargs['algorithm'] = algorithm

        return cls(**kwargs)

    @property
    def base_url(self) -> str:
        return f"{self.host.rstrip('/')}:{self.port}"

    @property
    def credentials(self) -> Credentials:
        return Credentials(id=self.token, key=self.secret, algorithm=self.algorithm)
