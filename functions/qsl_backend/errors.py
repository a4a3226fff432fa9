"""
Typed failures raised by the QSL backend.

Every error carries a stable application code and an HTTP-style status so
the request boundary can turn it into the failure envelope.
"""

from __future__ import annotations


class QslError(Exception):
    """Base class for failures surfaced to API callers."""

    def __init__(self, message: str, code: int = -1, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class SignatureMismatchError(QslError):
    def __init__(self, request_id: str | None):
        super().__init__(
            "COS signature check failed: verify the access key pair and region "
            f"(RequestId: {request_id})",
            1001,
            403,
        )


class AccessDeniedError(QslError):
    def __init__(self, request_id: str | None):
        super().__init__(
            "Access denied: check the key's bucket permissions "
            f"(RequestId: {request_id})",
            1002,
            403,
        )


class InvalidBucketError(QslError):
    def __init__(self, bucket: str, request_id: str | None):
        super().__init__(
            f"Invalid bucket name: {bucket} (RequestId: {request_id})", 1003, 400
        )


class InvalidRegionError(QslError):
    def __init__(self, region: str, request_id: str | None):
        super().__init__(
            f"Invalid region: {region} (RequestId: {request_id})", 1004, 400
        )


class StoreReadError(QslError):
    def __init__(self, message: str):
        super().__init__(f"Data read failed: {message}", 1005, 500)


class StoreWriteError(QslError):
    def __init__(self, message: str):
        super().__init__(f"Data save failed: {message}", 1003, 500)


class MalformedInputError(QslError):
    def __init__(self, message: str, code: int):
        super().__init__(message, code, 400)


class CardValidationError(QslError):
    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__(
            f"Card validation failed: {'; '.join(self.violations)}", 2001, 400
        )


class CardNotFoundError(QslError):
    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"No card found with id {card_id}", 2003, 404)


class RequestError(QslError):
    """Malformed request at the routing layer (bad body, action or type)."""

    def __init__(self, message: str, code: int):
        super().__init__(message, code, 400)
