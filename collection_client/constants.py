"""
Constants for the Collection+JSON API client.
Compatible with the Hawk request-signing scheme used by the API server.
"""

import hashlib

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_API_VERSION = "api-version"
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"

MEDIA_TYPE = "application/vnd.collection+json"
API_VERSION = "1"

# Hawk header scheme and normalized string version
HAWK_SCHEME = "Hawk"
HAWK_HEADER_VERSION = "1"

# Supported MAC algorithms
SUPPORTED_ALGORITHMS = {
    'sha1': hashlib.sha1,
    'sha256': hashlib.sha256,
}

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}

# Default configuration values
DEFAULT_CONFIG = {
    'host': 'https://api.forthecity.org',
    'port': 443,
    'algorithm': 'sha256',
    'timeout': 30,              # HTTP timeout in seconds
}
