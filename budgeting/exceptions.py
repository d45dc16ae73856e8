# budgeting/exceptions.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFoundOrAccessDenied(NotFound):
    """
    Raised both when a row is missing and when it belongs to someone else,
    so callers can't probe for other users' data.
    """
    default_detail = 'Not found or access denied'

    def __init__(self, entity='Record'):
        super().__init__(f"{entity} not found or access denied")


class StorageFailure(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Server error'
    default_code = 'storage_failure'


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception("Storage failure in %s", type(view).__name__ if view else 'unknown view')
        exc = StorageFailure()

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    if isinstance(detail, dict) and 'detail' in detail:
        response.data = {"error": detail['detail']}
    else:
        response.data = {"error": "Validation failed", "details": detail}
    return response
