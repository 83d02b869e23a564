"""
URL query strings with array parameters.

``{'q': 'foster care', 'issues': ['A', 'B']}`` encodes to
``q=foster%20care&issues[]=A&issues[]=B``.
"""

from collections.abc import Mapping
from typing import Dict, List, Union
from urllib.parse import quote, unquote

ARRAY_SUFFIX = '[]'

# Left unescaped, as encodeURIComponent does
_SAFE = "!*'()"


def _text(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    return str(value)


def _parameterize(key: str, value) -> str:
    return quote(key, safe=_SAFE) + '=' + quote(_text(value), safe=_SAFE)


def encode_params(params) -> str:
    """
    Turn a mapping into a URL query string.

    Scalars become ``key=value``; lists and tuples become one ``key[]=value``
    pair per element, in order. Keys are visited in mapping order.

    Args:
        params: Mapping of names to scalars or sequences of scalars

    Returns:
        The query string without a leading ``?``; empty for an empty mapping
    """
    if not params:
        return ''

    if not isinstance(params, Mapping):
        raise TypeError(f"params must be a mapping, not {type(params).__name__}")

    pairs = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            array_key = quote(str(key), safe=_SAFE) + ARRAY_SUFFIX
            for element in value:
                pairs.append(array_key + '=' + quote(_text(element), safe=_SAFE))
        else:
            pairs.append(_parameterize(str(key), value))

    return '&'.join(pairs)


def decode_params(query: str) -> Dict[str, Union[str, List[str]]]:
    """
    Parse a query string produced by ``encode_params``.

    ``key[]`` pairs collect into lists; values come back as strings.
    """
    params = {}
    if not query:
        return params

    for pair in query.lstrip('?').split('&'):
        if not pair:
            continue
        raw_key, _, raw_value = pair.partition('=')
        value = unquote(raw_value)

        if raw_key.endswith(ARRAY_SUFFIX):
            key = unquote(raw_key[:-len(ARRAY_SUFFIX)])
            params.setdefault(key, []).append(value)
        else:
            params[unquote(raw_key)] = value

    return params
