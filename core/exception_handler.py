"""
Custom DRF Exception Handler.

Every error leaving the API has the same shape:

    {"error": "<human readable message>", "details": <optional structured data>}

On top of DRF's default handling this handler:
1. Flattens DRF's ``detail``/field-error payloads into the ``error`` string
2. Removes the WWW-Authenticate header from 401 responses (it breaks CORS for
   cookie based JWT clients)
3. Turns database errors that escaped a view into a 500 carrying the store's
   message, so upstream failures stay debuggable
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(data):
    """
    Dig the first readable message out of a DRF error payload.
    """
    if isinstance(data, dict):
        if 'detail' in data:
            return _first_message(data['detail'])
        for field, errors in data.items():
            message = _first_message(errors)
            if message:
                return message if field == 'non_field_errors' else f"{field}: {message}"
        return None
    if isinstance(data, (list, tuple)):
        for item in data:
            message = _first_message(item)
            if message:
                return message
        return None
    return str(data) if data is not None else None


def custom_exception_handler(exc, context):
    """
    Reshape DRF error responses into ``{"error": ...}`` bodies.

    Args:
        exc: The exception that was raised
        context: Dictionary with 'view' and 'request' keys

    Returns:
        Response object, or None to let Django handle the exception
    """
    response = exception_handler(exc, context)

    if response is None:
        if isinstance(exc, DatabaseError):
            view = context.get('view')
            logger.exception(f"Database error in {view.__class__.__name__ if view else 'unknown view'}")
            return Response({'error': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return None

    data = response.data
    body = {'error': _first_message(data) or 'Request failed'}
    if isinstance(data, (dict, list)) and not (isinstance(data, dict) and set(data.keys()) <= {'detail', 'code'}):
        body['details'] = data
    response.data = body

    if response.status_code == 401:
        response.headers.pop('WWW-Authenticate', None)

    return response
