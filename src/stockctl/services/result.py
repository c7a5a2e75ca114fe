"""Return values of the stockctl service layer.

Every service method hands back a :class:`ServiceResult`. Expected ledger
failures such as an unknown id, a rejected name or a short stock count are
reported through ``error`` and never raised.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed: an ErrorCode value, a message, and context ids."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one ledger operation.

    ``op`` names the operation (``"add_warehouse"``, ``"transfer_stock_item"``).
    On success ``data`` holds the affected records; ``warnings`` collects plugin
    failures that did not undo the change. ``meta`` is only filled in by
    ``--verbose`` stage timings.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """A failed result; keyword arguments become ``error.detail``."""
        error = ServiceError(code=code, message=message, detail=detail)
        return cls(ok=False, op=op, error=error)
