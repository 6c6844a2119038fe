"""Shared response envelopes"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """Envelope returned by every action endpoint.

    Failures are values, not exceptions: the browser always receives
    ``success`` plus either ``data`` or ``error``.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None
    fieldErrors: Optional[dict[str, list[str]]] = None
    redirectTo: Optional[str] = None

    # Status of the backend response that produced this result (not serialised)
    status_code: Optional[int] = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None, **extra) -> "ActionResult":
        return cls(success=True, data=data, message=message, **extra)

    @classmethod
    def fail(cls, error: str, **extra) -> "ActionResult":
        return cls(success=False, error=error, **extra)


class Page(BaseModel):
    """Paginated list as returned by the backend"""

    data: list[Any] = []
    total: int = 0
    page: int = 1
    limit: int = 10
