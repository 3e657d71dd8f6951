"""
Pydantic v2 data models for staffdesk.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DateNeeded(BaseModel):
    """One staffing row of a booking's ``datesNeeded`` list."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    date: str
    staff_count: int = Field(default=0, ge=0, alias="staffCount")
    # "" marks an unfilled slot; index identity matters
    staff_ids: list[str] = Field(default_factory=list, alias="staffIds")
    role: Optional[str] = None
    shift: Optional[str] = None

    @property
    def filled(self) -> int:
        return sum(1 for sid in self.staff_ids if sid)


class PendingAction(BaseModel):
    """The confirmable part of a proposed write (never persisted)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    label: str
    success_message: str = Field(alias="successMessage")
    data: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
