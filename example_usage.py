#!/usr/bin/env python3
"""
Basic usage examples for the Collection+JSON API client.

Reads TOKEN, SECRET, HOST and PORT from the environment and walks through
the main read, search and write calls.
"""

import logging
import sys

from collection_client import Client, CollectionClientError, fill_template


def show(label, result):
    """Print one ApiResult."""
    if result.ok:
        print(f"   ✓ {label}: {result.status_code}")
    else:
        print(f"   ✗ {label}: {result.status_code} {result.error}")


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.INFO)

    print("=== Collection+JSON Client Basic Usage Examples ===\n")

    try:
        client = Client.from_env()
    except CollectionClientError as e:
        print(f"Configuration error: {e}")
        print("Set TOKEN, SECRET, HOST and PORT.")
        return 1

    print(f"1. Client created for: {client.config.base_url}")
    print(f"   Key id: {client.credentials.id}\n")

    with client:
        print("2. Fetching opportunity 1...")
        result = client.opportunities.get(1)
        show("GET /api/opportunities/1", result)
        if result.ok:
            print(f"   Opportunity: {result.data}")
        print()

        print("3. Fetching a missing organization...")
        result = client.organizations.get(10000)
        show("GET /api/organizations/10000", result)
        if result.error is not None and getattr(result.error, 'collection_error', None):
            print(f"   Server error object: {result.error.collection_error}")
        print()

        print("4. Searching...")
        result = client.search({'q': 'foster care', 'issues': ['Education', 'Children/Youth']})
        show("GET /api/search", result)
        if result.ok:
            print(f"   {len(result.data)} match(es)")
        print()

        print("5. Signing up for opportunity 1...")
        result = client.signup.template(1)
        show("GET signup template", result)
        if result.ok:
            template = fill_template(result.data, {
                'givenName': 'Jon',
                'familyName': 'Doe',
                'email': 'jon.doe@example.com',
            })
            show("POST signup", client.signup.submit(1, template))
        print()

    print("=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
