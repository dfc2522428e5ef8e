import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class LedgerError(APIException):
    """Base class for carry-forward ledger failures."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Ledger operation failed'
    default_code = 'ledger_error'


class InvalidPeriod(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Month and year are required'
    default_code = 'invalid_period'


class UnknownCategory(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Unknown payee category'
    default_code = 'unknown_category'


class LedgerBatchError(LedgerError):
    """A monthly batch was rolled back; ``cause`` holds the original error."""
    default_detail = 'Failed to save monthly records'
    default_code = 'batch_failed'

    def __init__(self, detail=None, *, cause: Exception | None = None):
        super().__init__(detail)
        self.cause = cause


def _message(data) -> str:
    if isinstance(data, dict):
        detail = data.get('detail')
        if detail is not None:
            return str(detail)
        first_key = next(iter(data), None)
        if first_key is not None:
            value = data[first_key]
            if isinstance(value, list) and value:
                value = value[0]
            return f"{first_key}: {value}"
        return 'Request failed'
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error in %s', context.get('view'), exc_info=exc)
        return Response({'success': False, 'message': 'Internal server error', 'error': str(exc)}, status=500)
    # normalize response
    if isinstance(exc, LedgerBatchError):
        error = str(exc.cause) if exc.cause is not None else str(exc.detail)
    else:
        error = resp.data
    return Response({'success': False, 'message': _message(resp.data), 'error': error}, status=resp.status_code)
