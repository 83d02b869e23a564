"""
Custom exceptions for the Collection+JSON API client.
"""


class CollectionClientError(Exception):
    """Base exception for client errors."""
    pass


class ConfigurationError(CollectionClientError):
    """Raised when client configuration is invalid."""
    pass


class MissingCredentials(ConfigurationError):
    """Raised when the credentials id or key is absent."""
    pass


class UnknownAlgorithm(ConfigurationError):
    """Raised when the credentials name an unsupported MAC algorithm."""
    pass


class InvalidRequestSpec(CollectionClientError):
    """Raised when a request cannot be signed (missing method or URL)."""
    pass


class TransportError(CollectionClientError):
    """No response was obtained (DNS, connection refused, timeout)."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class SchemaViolation(CollectionClientError):
    """
    The response body is not a valid Collection+JSON document.

    ``violations`` is a list of ``(path, expected, actual)`` tuples.
    """

    def __init__(self, violations):
        self.violations = list(violations)
        summary = "; ".join(
            f"{path}: expected {expected}, got {actual}"
            for path, expected, actual in self.violations
        )
        super().__init__(f"Schema violation: {summary}")


class LogicalFailure(CollectionClientError):
    """The server answered with a status outside the 2xx/3xx classes."""

    def __init__(self, status_code, collection_error=None, body=None):
        self.status_code = status_code
        self.collection_error = collection_error
        self.body = body
        message = f"Request failed with status {status_code}"
        if isinstance(collection_error, dict) and collection_error.get('message'):
            message += f": {collection_error['message']}"
        super().__init__(message)


class EmptyCollection(CollectionClientError):
    """A valid document held no items where at least one was expected."""
    pass
