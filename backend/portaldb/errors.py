"""
Domain errors raised by portal services.

Services raise these; routers translate them into HTTP responses via
`to_http_exception`. Each error carries the status code it maps to.
"""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status


class PortalError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "portal_error"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InvalidRequest(PortalError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_request"


class PublishBlocked(PortalError):
    """First-publish or level gate refused an offering publish."""

    status_code = status.HTTP_409_CONFLICT
    code = "publish_blocked"


class SetupRequired(PortalError):
    """A write hit a store that has not been migrated yet."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "setup_required"


def to_http_exception(exc: PortalError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))
