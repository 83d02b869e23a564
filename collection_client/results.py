"""
Response classification and interpretation.

Every public client call returns an ``ApiResult`` holding the transport
envelope (``response``), the parsed or normalized body (``data``) and the
failure, if any (``error``).
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .collection import (
    extract_error,
    extract_template,
    first_item,
    objectify_collection,
    validate_collection
)
from .exceptions import (
    CollectionClientError,
    EmptyCollection,
    LogicalFailure,
    SchemaViolation,
    TransportError
)
from .transport import TransportResponse

logger = logging.getLogger(__name__)

# Result shapes
ITEM = 'item'
LIST = 'list'
TEMPLATE = 'template'
WRITE = 'write'

SHAPES = (ITEM, LIST, TEMPLATE, WRITE)


def is_logical_success(status_code) -> bool:
    """True when the status code's leading digit is 2 or 3."""
    if status_code is None:
        return False
    return str(status_code)[:1] in ('2', '3')


@dataclass
class ApiResult:
    """Outcome of one API call: response, data and error."""
    response: TransportResponse
    data: Any = None
    error: Optional[CollectionClientError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code

    def raise_for_error(self):
        """Raise the carried error, if any; return self otherwise."""
        if self.error is not None:
            raise self.error
        return self


def _parse_body(raw_body):
    """Parse a JSON body; raises SchemaViolation when it is not JSON."""
    try:
        return json.loads(raw_body)
    except ValueError:
        raise SchemaViolation([('document', 'JSON document', 'unparseable body')])


def _normalize(document, shape):
    if shape == ITEM:
        return first_item(document)
    if shape == LIST:
        return objectify_collection(document)
    if shape == TEMPLATE:
        template = extract_template(document)
        if template is None:
            raise SchemaViolation([('collection.template', 'object', 'missing')])
        return template
    if 'items' in document['collection']:
        return objectify_collection(document)
    return document


def _interpret_failure(envelope: TransportResponse) -> ApiResult:
    document = None
    collection_error = None

    if envelope.raw_body:
        try:
            document = _parse_body(envelope.raw_body)
            collection_error = extract_error(validate_collection(document))
        except SchemaViolation as e:
            logger.debug("Failure body is not a Collection+JSON document: %s", e)

    logger.debug("Logical failure with status %s", envelope.status_code)
    error = LogicalFailure(envelope.status_code, collection_error, envelope.raw_body)
    return ApiResult(envelope, data=document, error=error)


def interpret(envelope: TransportResponse, shape: str) -> ApiResult:
    """
    Turn a transport envelope into an ApiResult.

    A logical success with an empty body (e.g. 204 or 304) on an ITEM, LIST
    or TEMPLATE call carries a SchemaViolation, so ``ok`` is False there even
    though ``is_logical_success(status_code)`` is True.

    Args:
        envelope: Result of Transport.send
        shape: One of ITEM, LIST, TEMPLATE or WRITE

    Returns:
        ApiResult; never raises for response content
    """
    if shape not in SHAPES:
        raise ValueError(f"Unknown result shape: {shape!r}")

    if envelope.transport_error is not None:
        error = TransportError(
            f"HTTP request failed: {envelope.transport_error}",
            cause=envelope.transport_error
        )
        return ApiResult(envelope, error=error)

    if not is_logical_success(envelope.status_code):
        return _interpret_failure(envelope)

    if not envelope.raw_body:
        if shape == WRITE:
            return ApiResult(envelope)
        error = SchemaViolation([('document', 'JSON document', 'empty body')])
        logger.warning("Empty body on status %s", envelope.status_code)
        return ApiResult(envelope, error=error)

    document = None
    try:
        document = _parse_body(envelope.raw_body)
        validate_collection(document)
        data = _normalize(document, shape)
    except SchemaViolation as e:
        logger.warning("Response does not match Collection+JSON: %s", e)
        return ApiResult(envelope, data=document, error=e)
    except EmptyCollection as e:
        return ApiResult(envelope, error=e)

    return ApiResult(envelope, data=data)
