from __future__ import annotations


class ApiError(Exception):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        error_class: str,
        retryable: bool,
        http_status: int,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.error_class = error_class
        self.retryable = retryable
        self.http_status = http_status


class ValidationError(ApiError):
    def __init__(self, message: str, *, code: str = "REQ_VALIDATION_FAILED") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="validation",
            retryable=False,
            http_status=400,
        )


class NotFoundError(ApiError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="not_found",
            retryable=False,
            http_status=404,
        )


class StoreError(ApiError):
    """Persistence failure that could not be recovered locally."""

    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="persistence",
            retryable=False,
            http_status=500,
        )
