"""
Render every API error as ``{"message": ..., "error": ...}``.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = 'Server error'


def _first_message(detail):
    """Pull a human readable line out of a DRF error detail structure."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ('detail', 'non_field_errors'):
                return message
            return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def _exposes_detail(context):
    view = context.get('view')
    return getattr(view, 'expose_error_detail', True)


def civicfeed_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'request', exc_info=exc)
        body = {'message': SERVER_ERROR_MESSAGE}
        if _exposes_detail(context):
            body['error'] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'message': _first_message(exc.detail) or 'Invalid input',
            'error': exc.detail,
        }
    else:
        response.data = {'message': _first_message(response.data)}
    return response
