"""
Collection+JSON validation and normalization.

Documents are validated with marshmallow schemas and then flattened into
plain dictionaries: each item becomes ``{"href": ..., <name>: <value>, ...}``.
"""

import copy
from collections.abc import Mapping

from marshmallow import INCLUDE, Schema
from marshmallow.fields import Dict, List, Nested, Raw, String

from .exceptions import EmptyCollection, SchemaViolation


class OpenSchema(Schema):
    """Base schema that tolerates unknown fields, so new server fields pass through"""

    class Meta:
        unknown = INCLUDE


class DataEntrySchema(OpenSchema):
    name = String(required=True, allow_none=False)
    value = Raw(allow_none=True)
    array = List(Raw(allow_none=True))
    object = Dict()


class ItemSchema(OpenSchema):
    href = String(required=True, allow_none=False)
    data = List(Nested(DataEntrySchema))
    links = List(Dict())


class TemplateSchema(OpenSchema):
    data = List(Nested(DataEntrySchema))


class ErrorSchema(OpenSchema):
    title = String()
    # Some server revisions send a number, others a string
    code = Raw(allow_none=True)
    message = String()


class CollectionSchema(OpenSchema):
    href = String(required=True, allow_none=False)
    version = String(required=True, allow_none=False)
    links = List(Dict())
    items = List(Nested(ItemSchema))
    queries = List(Dict())
    template = Nested(TemplateSchema)
    error = Nested(ErrorSchema)


class DocumentSchema(OpenSchema):
    collection = Nested(CollectionSchema, required=True, allow_none=False)


_DOCUMENT_SCHEMA = DocumentSchema()
_MISSING = object()


def _flatten_messages(messages, path=()):
    if isinstance(messages, dict):
        for key, value in messages.items():
            yield from _flatten_messages(value, path if key == '_schema' else path + (key,))
    elif isinstance(messages, list):
        for message in messages:
            if isinstance(message, (dict, list)):
                yield from _flatten_messages(message, path)
            else:
                yield path, str(message)
    else:
        yield path, str(messages)


def _format_path(path) -> str:
    if not path:
        return 'document'
    text = ''
    for key in path:
        if isinstance(key, int):
            text += f'[{key}]'
        else:
            text += f'.{key}' if text else str(key)
    return text


def _resolve_field(path):
    node = _DOCUMENT_SCHEMA
    for key in path:
        if isinstance(node, List):
            node = node.inner
            continue
        if isinstance(node, Nested):
            node = node.schema
        if not isinstance(node, Schema):
            return None
        node = node.fields.get(key)
        if node is None:
            return None
    return node


def _field_shape(node) -> str:
    if isinstance(node, (Schema, Nested, Dict)):
        return 'object'
    if isinstance(node, List):
        return 'array'
    if isinstance(node, String):
        return 'string'
    return 'any value'


def _lookup(document, path):
    node = document
    for key in path:
        if isinstance(key, int) and isinstance(node, list) and key < len(node):
            node = node[key]
        elif isinstance(key, str) and isinstance(node, dict) and key in node:
            node = node[key]
        else:
            return _MISSING
    return node


def _value_shape(value) -> str:
    if value is _MISSING:
        return 'missing'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def validate_collection(document):
    """
    Validate a parsed Collection+JSON document.

    Args:
        document: Parsed JSON value

    Returns:
        The same document, unchanged

    Raises:
        SchemaViolation: With one (path, expected, actual) entry per problem
    """
    messages = _DOCUMENT_SCHEMA.validate(document)
    if not messages:
        return document

    violations = []
    seen = set()
    for path, _message in _flatten_messages(messages):
        if path in seen:
            continue
        seen.add(path)
        violations.append((
            _format_path(path),
            _field_shape(_resolve_field(path)),
            _value_shape(_lookup(document, path)),
        ))

    raise SchemaViolation(violations)


def _get_value(entry):
    """
    Resolve a data entry's payload: value, then array, then object.

    Returns _MISSING when the entry carries none of the three.
    """
    for key in ('value', 'array', 'object'):
        if key in entry:
            return copy.deepcopy(entry[key])
    return _MISSING


def objectify_item(item) -> dict:
    """
    Turn a Collection+JSON item into a plain dictionary.

    The names in the data array become keys and their values become the
    values. Entries without value, array or object are left out.
    """
    obj = {'href': item['href']}

    if 'links' in item:
        obj['links'] = copy.deepcopy(item['links'])

    for entry in item.get('data') or []:
        value = _get_value(entry)
        if value is not _MISSING:
            obj[entry['name']] = value

    return obj


def objectify_collection(document) -> list:
    """Normalize every item of a document, keeping the response order."""
    items = document['collection'].get('items') or []
    return [objectify_item(item) for item in items]


def first_item(document) -> dict:
    """
    Normalize the first item of a document.

    Raises:
        EmptyCollection: If the document holds no items
    """
    items = document['collection'].get('items')
    if not items:
        raise EmptyCollection(f"No items in collection {document['collection']['href']}")
    return objectify_item(items[0])


def extract_template(document):
    """Return a copy of the document's write template, not flattened."""
    return copy.deepcopy(document['collection'].get('template'))


def extract_error(document):
    """Return the document's error object as sent, or None."""
    return document['collection'].get('error')


def build_template(values) -> dict:
    """
    Build a write body ``{"template": {"data": [...]}}``.

    Accepts a full write body, a template object with a ``data`` list (as
    returned by ``extract_template``), a list of data entries, or a plain
    mapping of names to values.
    """
    if isinstance(values, Mapping):
        if 'template' in values:
            return copy.deepcopy(dict(values))
        if isinstance(values.get('data'), list):
            return {'template': {'data': copy.deepcopy(values['data'])}}
        data = [{'name': name, 'value': value} for name, value in values.items()]
    else:
        data = [dict(entry) for entry in values]

    return {'template': {'data': copy.deepcopy(data)}}


def fill_template(template, values: Mapping) -> dict:
    """
    Set values on a template's data entries by name.

    Names not present in the template are appended as new entries.
    """
    filled = copy.deepcopy(template) if template else {}
    data = filled.setdefault('data', [])
    remaining = dict(values)

    for entry in data:
        if entry.get('name') in remaining:
            entry['value'] = remaining.pop(entry['name'])

    for name, value in remaining.items():
        data.append({'name': name, 'value': value})

    return filled
