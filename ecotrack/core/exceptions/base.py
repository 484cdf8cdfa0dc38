from typing import Any, Dict, Optional
from fastapi import status

from ecotrack.core.exceptions.handler import ServiceError, ServiceErrorCode


class DuplicatePhoneError(ServiceError):
    def __init__(self, phone: str):
        super().__init__(
            code=ServiceErrorCode.DUPLICATE_PHONE,
            message="Phone number already exists",
            status_code=status.HTTP_409_CONFLICT,
            details={"phone": phone},
        )
        self.phone = phone


class NotFoundError(ServiceError):
    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ServiceErrorCode.NOT_FOUND,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class UnauthorizedError(ServiceError):
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ServiceErrorCode.INVALID_TOKEN,
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class InsufficientPointsError(ServiceError):
    def __init__(self, requested: int, available: int):
        super().__init__(
            code=ServiceErrorCode.INSUFFICIENT_POINTS,
            message="Insufficient points",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"requested": requested, "available": available},
        )
        self.requested = requested
        self.available = available


class RemoteRequestFailedError(ServiceError):
    """Non-2xx response from the remote API; keeps the upstream status and body."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            code=ServiceErrorCode.REMOTE_REQUEST_FAILED,
            message=f"API Error: {status_code} - {body}",
            status_code=status_code,
            details={"body": body},
        )
        self.body = body
