"""
Collection+JSON API client with Hawk request signing.

A Python client for the For the City API. Requests are signed with Hawk
credentials and responses are flattened from Collection+JSON into plain
dictionaries.

Example usage:
    from collection_client import Client, ClientConfig

    client = Client(ClientConfig(token="your-id", secret="your-key"))
    result = client.opportunities.get(1)
    if result.ok:
        print(result.data)
    else:
        print(result.error)
"""

from .client import Client
from .collection import (
    build_template,
    extract_error,
    extract_template,
    fill_template,
    first_item,
    objectify_collection,
    objectify_item,
    validate_collection
)
from .config import ClientConfig, Credentials
from .exceptions import (
    CollectionClientError,
    ConfigurationError,
    EmptyCollection,
    InvalidRequestSpec,
    LogicalFailure,
    MissingCredentials,
    SchemaViolation,
    TransportError,
    UnknownAlgorithm
)
from .query import decode_params, encode_params
from .results import ApiResult, is_logical_success
from .signing import SignedRequest, build_ext, canonicalize, sign_request
from .transport import Transport, TransportResponse
from .constants import (
    MEDIA_TYPE,
    API_VERSION,
    DEFAULT_CONFIG,
    SUPPORTED_ALGORITHMS
)

__version__ = "1.0.0"
__all__ = [
    "Client",
    "ClientConfig",
    "Credentials",
    "ApiResult",
    "SignedRequest",
    "Transport",
    "TransportResponse",
    "CollectionClientError",
    "ConfigurationError",
    "MissingCredentials",
    "UnknownAlgorithm",
    "InvalidRequestSpec",
    "TransportError",
    "SchemaViolation",
    "LogicalFailure",
    "EmptyCollection",
    "build_ext",
    "canonicalize",
    "sign_request",
    "encode_params",
    "decode_params",
    "is_logical_success",
    "validate_collection",
    "objectify_item",
    "objectify_collection",
    "first_item",
    "extract_template",
    "extract_error",
    "build_template",
    "fill_template",
    "MEDIA_TYPE",
    "API_VERSION",
    "DEFAULT_CONFIG",
    "SUPPORTED_ALGORITHMS"
]
