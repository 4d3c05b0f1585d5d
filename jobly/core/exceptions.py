from typing import Any, Dict, List, Optional, Union


class AppException(Exception):
    def __init__(
        self,
        message: Union[str, List[str]],
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        if isinstance(message, (list, tuple)):
            self.messages = [str(m) for m in message]
        else:
            self.messages = [message]
        self.message = "; ".join(self.messages)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class BadRequestError(AppException):
    """Malformed, duplicate or empty input. Accepts a single message or a list of them."""
    def __init__(self, message: Union[str, List[str]] = "Bad Request", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="BAD_REQUEST",
            details=details
        )


class UnauthorizedError(AppException):
    """Missing identity or insufficient privilege; both map to 401."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED"
        )


class NotFoundError(AppException):
    def __init__(self, message: str = "Not Found"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )


class ServiceUnavailableError(AppException):
    def __init__(self, message: str = "Storage is temporarily unavailable, please retry."):
        super().__init__(
            message=message,
            status_code=503,
            error_code="SERVICE_UNAVAILABLE"
        )
