"""
Error taxonomy for balance payment operations.

Services raise these; the app factory renders them as ``{"error": message}``
with the status carried by the class.
"""
from fastapi import status


class PaymentError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(PaymentError):
    """Malformed or contradictory input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PaymentError):
    """Referenced entity is absent or soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class InvalidState(PaymentError):
    """Entity exists but the operation does not apply to it."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(PaymentError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
