"""Map domain errors to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Only the error code and
its user-safe message reach the client.
"""

from loguru import logger
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ticketing.domain.errors import (
    DomainError,
    ErrorCode,
    InsufficientInventoryError,
    StorageUnavailableError,
)
from ticketing.stores.interfaces import StoreError

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TICKET_EVENT_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BOOKING_ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.CREATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.UPDATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.CANCEL_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, InsufficientInventoryError):
        body["requested"] = error.requested
        body["available"] = error.available
    return Response(body, status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST))


def domain_exception_handler(exc, context):
    if isinstance(exc, StoreError):
        # Reads outside a reservation transaction surface here.
        logger.bind(error=str(exc)).error("Storage failure while handling request")
        return domain_error_response(StorageUnavailableError())
    if isinstance(exc, DomainError):
        return domain_error_response(exc)
    return exception_handler(exc, context)
