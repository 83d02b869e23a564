"""
Unit tests for Hawk request signing.
"""

import base64
import dataclasses
import hashlib
import hmac
import re
import uuid

import pytest

from collection_client import (
    Credentials,
    InvalidRequestSpec,
    MissingCredentials,
    UnknownAlgorithm,
    build_ext,
    canonicalize,
    sign_request
)
from collection_client.signing import compute_mac

URL = "https://api.forthecity.org:443/api/opportunities/1"

HEADER_PATTERN = re.compile(
    r'^Hawk id="([^"]+)", ts="(\d+)", nonce="([^"]+)"(?:, ext="((?:[^"\\]|\\.)*)")?, mac="([^"]+)"$'
)


def expected_mac(key, normalized, digestmod=hashlib.sha256):
    mac = hmac.new(key.encode('utf-8'), normalized.encode('utf-8'), digestmod)
    return base64.b64encode(mac.digest()).decode('ascii')


class TestCanonicalize:
    """Test the Hawk normalized string."""

    def test_format(self):
        """Test the exact normalized string layout."""
        normalized = canonicalize('get', URL, 1353832234, 'j4h3g2')

        assert normalized == (
            "hawk.1.header\n"
            "1353832234\n"
            "j4h3g2\n"
            "GET\n"
            "/api/opportunities/1\n"
            "api.forthecity.org\n"
            "443\n"
            "\n"
            "\n"
        )

    def test_ext_and_query(self):
        """Test that the query string and ext are included."""
        normalized = canonicalize(
            'GET', 'http://Example.com:8000/resource/1?b=1&a=2',
            1353832234, 'j4h3g2', 'some-app-ext-data'
        )

        assert normalized == (
            "hawk.1.header\n1353832234\nj4h3g2\nGET\n/resource/1?b=1&a=2\n"
            "example.com\n8000\n\nsome-app-ext-data\n"
        )

    def test_default_ports(self):
        """Test ports derived from the scheme."""
        assert canonicalize('GET', 'http://example.com/a', 1, 'n').split('\n')[6] == '80'
        assert canonicalize('GET', 'https://example.com/a', 1, 'n').split('\n')[6] == '443'

    def test_ext_escaping(self):
        """Test backslashes and newlines in ext are escaped."""
        normalized = canonicalize('GET', URL, 1, 'n', 'a\\b\nc')

        assert normalized.endswith('a\\\\b\\nc\n')

    def test_deterministic(self):
        """Test identical inputs give identical output."""
        first = canonicalize('POST', URL, 1700000000, 'abc', "{a: '1'}")
        second = canonicalize('POST', URL, 1700000000, 'abc', "{a: '1'}")

        assert first == second

    @pytest.mark.parametrize("field,value", [
        ('method', 'POST'),
        ('url', URL + '0'),
        ('timestamp', 1700000001),
        ('nonce', 'abd'),
        ('ext', "{a: '2'}"),
    ])
    def test_differs_on_each_field(self, field, value):
        """Test that changing any one input changes the output."""
        base = {
            'method': 'GET',
            'url': URL,
            'timestamp': 1700000000,
            'nonce': 'abc',
            'ext': "{a: '1'}",
        }
        changed = dict(base, **{field: value})

        assert canonicalize(**base) != canonicalize(**changed)

    def test_ext_absent_differs_from_present(self):
        """Test that a missing ext differs from a present one."""
        assert canonicalize('GET', URL, 1, 'n') != canonicalize('GET', URL, 1, 'n', '{}')

    @pytest.mark.parametrize("method,url", [
        ('', URL),
        (None, URL),
        ('GET', ''),
        ('GET', None),
        ('GET', '/api/opportunities/1'),
    ])
    def test_invalid_request(self, method, url):
        """Test missing method or non-absolute URL."""
        with pytest.raises(InvalidRequestSpec):
            canonicalize(method, url, 1, 'n')


class TestBuildExt:
    """Test the ext string serializer."""

    def test_no_payload(self):
        assert build_ext(None) is None

    def test_key_order(self):
        """Test pairs follow the payload's key order."""
        ext = build_ext({'givenName': 'Jon', 'familyName': 'Doe', 'count': 2})

        assert ext == "{givenName: 'Jon', familyName: 'Doe', count: '2'}"

    def test_empty_mapping(self):
        assert build_ext({}) == '{}'

    def test_scalars(self):
        """Test booleans and None render as JSON-style words."""
        assert build_ext({'active': True, 'lead': None}) == "{active: 'true', lead: 'null'}"

    def test_nested_values_are_text(self):
        """Test nested values are written as compact JSON inside the quotes."""
        ext = build_ext({'template': {'data': [{'name': 'a', 'value': 1}]}})

        assert ext == "{template: '{\"data\":[{\"name\":\"a\",\"value\":1}]}'}"

    def test_non_mapping(self):
        with pytest.raises(InvalidRequestSpec):
            build_ext(['a', 'b'])


class TestSignRequest:
    """Test the signer."""

    @pytest.fixture
    def credentials(self):
        return Credentials(id='dh37fgj492je', key='werxhqb98rpaxn39848xrunpaw3489ruxnpa98w4rxn')

    def test_header_format(self, credentials):
        """Test the Authorization header layout."""
        signed = sign_request(credentials, 'GET', URL)

        match = HEADER_PATTERN.match(signed.authorization)
        assert match is not None
        assert match.group(1) == 'dh37fgj492je'
        assert match.group(2) == str(signed.timestamp)
        assert match.group(3) == signed.nonce
        assert match.group(4) is None
        assert match.group(5) == signed.mac
        uuid.UUID(signed.nonce)

    def test_mac(self, credentials):
        """Test the MAC is the base64 HMAC of the normalized string."""
        signed = sign_request(credentials, 'GET', URL, timestamp=1353832234, nonce='j4h3g2')

        normalized = canonicalize('GET', URL, 1353832234, 'j4h3g2')
        assert signed.mac == expected_mac(credentials.key, normalized)
        assert signed.authorization == (
            f'Hawk id="dh37fgj492je", ts="1353832234", nonce="j4h3g2", mac="{signed.mac}"'
        )

    def test_sha1(self):
        """Test signing with sha1 credentials."""
        credentials = Credentials(id='id', key='key', algorithm='sha1')
        signed = sign_request(credentials, 'GET', URL, timestamp=1, nonce='n')

        normalized = canonicalize('GET', URL, 1, 'n')
        assert signed.mac == expected_mac('key', normalized, hashlib.sha1)

    def test_bytes_key(self):
        """Test that a bytes key signs like its text form."""
        text_signed = sign_request(Credentials(id='id', key='key'), 'GET', URL, timestamp=1, nonce='n')
        bytes_signed = sign_request(Credentials(id='id', key=b'key'), 'GET', URL, timestamp=1, nonce='n')

        assert text_signed.mac == bytes_signed.mac

    def test_ext_from_payload(self, credentials):
        """Test that a write payload becomes the ext attribute."""
        payload = {'description': 'Made today', 'active': True}
        signed = sign_request(credentials, 'POST', URL, payload=payload, timestamp=1, nonce='n')

        assert signed.ext == "{description: 'Made today', active: 'true'}"
        assert f'ext="{signed.ext}"' in signed.authorization

        normalized = canonicalize('POST', URL, 1, 'n', signed.ext)
        assert signed.mac == expected_mac(credentials.key, normalized)

    def test_ext_quotes_escaped_in_header(self, credentials):
        """Test double quotes in ext are escaped in the header attribute."""
        signed = sign_request(credentials, 'POST', URL, payload={'msg': 'say "hi"'})

        assert 'ext="{msg: \'say \\"hi\\"\'}"' in signed.authorization
        assert HEADER_PATTERN.match(signed.authorization) is not None

    def test_ext_non_ascii(self, credentials):
        """Test ext text a header attribute cannot carry."""
        with pytest.raises(InvalidRequestSpec):
            sign_request(credentials, 'POST', URL, payload={'city': 'Zürich'})

    def test_unique_nonces(self, credentials):
        """Test that every call gets a fresh nonce."""
        nonces = {sign_request(credentials, 'GET', URL).nonce for _ in range(20)}

        assert len(nonces) == 20

    def test_fresh_timestamp(self, credentials):
        """Test the timestamp is current unix time in seconds."""
        import time

        before = int(time.time())
        signed = sign_request(credentials, 'GET', URL)
        after = int(time.time())

        assert before <= signed.timestamp <= after

    @pytest.mark.parametrize("credentials", [
        None,
        Credentials(id=None, key='key'),
        Credentials(id='', key='key'),
        Credentials(id='id', key=None),
        Credentials(id='id', key=''),
    ])
    def test_missing_credentials(self, credentials):
        with pytest.raises(MissingCredentials):
            sign_request(credentials, 'GET', URL)

    def test_unknown_algorithm(self):
        with pytest.raises(UnknownAlgorithm):
            sign_request(Credentials(id='id', key='key', algorithm='md5'), 'GET', URL)

    def test_invalid_request(self, credentials):
        with pytest.raises(InvalidRequestSpec):
            sign_request(credentials, '', URL)

    def test_credentials_immutable(self, credentials):
        """Test credentials cannot change under a signing operation."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            credentials.key = 'other'

    def test_compute_mac(self, credentials):
        assert compute_mac(credentials, 'abc') == expected_mac(credentials.key, 'abc')
