"""
Shared fixtures for client tests.
"""

import json

import pytest
import requests

from collection_client import Client, ClientConfig
from collection_client.constants import MEDIA_TYPE

BASE_URL = "https://api.forthecity.org:443"


def collection_document(items=None, **extra):
    """Build a minimal valid Collection+JSON document."""
    collection = {
        "href": BASE_URL + "/api/opportunities",
        "version": "1.0",
    }
    if items is not None:
        collection["items"] = items
    collection.update(extra)
    return {"collection": collection}


def opportunity_item(opportunity_id, title):
    return {
        "href": f"{BASE_URL}/api/opportunities/{opportunity_id}",
        "data": [
            {"name": "id", "value": str(opportunity_id)},
            {"name": "title", "value": title},
            {"name": "issues", "array": ["Education"]},
        ],
        "links": [{"rel": "organization", "href": BASE_URL + "/api/organizations/2"}],
    }


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects."""
    def _make(status_code, body=None, headers=None):
        response = requests.Response()
        response.status_code = status_code
        if body is None:
            response._content = b""
        elif isinstance(body, (dict, list)):
            response._content = json.dumps(body).encode("utf-8")
        else:
            response._content = body.encode("utf-8")
        response.encoding = "utf-8"
        response.headers["Content-Type"] = MEDIA_TYPE
        response.headers.update(headers or {})
        return response
    return _make


@pytest.fixture
def client():
    """Create test client."""
    return Client(ClientConfig(token="test-id", secret="test-secret-key"))
