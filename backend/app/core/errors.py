"""
   SKU 服务的业务异常。
   每个异常都带 HTTP 状态码，统一由 app/api/errors.py 转成
   {success: false, message, error?} 响应体。
"""

from __future__ import annotations
from typing import Optional


class SkuServiceError(Exception):
    """Base for all errors that leave the service as an error envelope."""

    status_code: int = 500

    def __init__(self, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(SkuServiceError):
    """Missing/blank required field or a value of the wrong type."""

    status_code = 400


class NotFoundError(SkuServiceError):
    """Identifier or business key has no matching row."""

    status_code = 404


class PersistenceError(SkuServiceError):
    """Any failure raised by the storage gateway; the driver message is kept in `error`."""

    status_code = 500


class AuthError(SkuServiceError):
    """Bearer token missing, malformed or rejected."""

    status_code = 401
