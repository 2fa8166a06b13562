"""Data models for decoded RPC errors.

This module provides:
- RpcEnvelope: the (code, message) pair extracted from a response body
- RpcError: the fully decoded error a caller switches on
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from btcrpc_errors.patterns import TaggedResult

from .codes import RpcErrorCode


class RpcEnvelope(BaseModel):
    """The ``{"code": ..., "message": ...}`` object of an RPC error response.

    Validation is strict: ``code`` must be a JSON integer (not a bool, float
    or numeric string) and ``message`` a JSON string. Other keys are ignored.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    code: int
    message: str


@dataclass(frozen=True)
class RpcError:
    """A decoded RPC error.

    Attributes:
        code: The integer code from the response.
        message: The message from the response, verbatim.
        category: The known category for ``code``, or None when Bitcoin Core
            does not define the code.
        detail: The classified message for categories that own a case
            table; None otherwise.
    """

    code: int
    message: str
    category: RpcErrorCode | None = None
    detail: TaggedResult | None = None

    @property
    def is_unknown(self) -> bool:
        return self.category is None

    @property
    def case(self) -> str | None:
        """Case name of the detail, if the message was classified."""
        return self.detail.case if self.detail is not None else None

    def __str__(self) -> str:
        name = self.category.rpc_name if self.category is not None else "UNKNOWN"
        if self.detail is not None:
            return f"{name}({self.detail})"
        return f"{name} [{self.code}]: {self.message}"
