"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``) and dump with
camelCase keys, matching the payloads the marketplace front end sends
and expects.

- ``UpdateOrderStatusDTO``: input for a status change.
- ``StatusTransitionResultDTO``: output of a successful status change.
- ``AvailableTransitionsDTO``: next statuses the caller may choose.
"""

from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_CAMEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class UpdateOrderStatusDTO(BaseModel):
    """Immutable DTO for a status change request.

    ``new_status`` is kept as a free string: an unknown status is not a
    malformed request, it is a transition no role is allowed to make.
    """

    model_config = _CAMEL_CONFIG

    order_id: str
    new_status: str

    @field_validator("order_id", "new_status")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank.")
        return v


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class StatusTransitionResultDTO(BaseModel):
    """Immutable DTO for a completed status transition."""

    model_config = _CAMEL_CONFIG

    order_id: UUID
    previous_status: str
    new_status: str

    @property
    def message(self) -> str:
        return f"Order status updated to {self.new_status}"

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            **self.model_dump(by_alias=True, mode="json"),
            "message": self.message,
        }


class AvailableTransitionsDTO(BaseModel):
    """Immutable DTO listing the statuses the caller may move an order to."""

    model_config = _CAMEL_CONFIG

    order_id: UUID
    status: str
    role: str
    allowed_statuses: List[str]

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
