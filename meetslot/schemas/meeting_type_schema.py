"""Meeting type data model."""

from typing import Optional

from pydantic import BaseModel, Field


class MeetingType(BaseModel):
    """A bookable kind of meeting offered by a host."""
    id: str
    host_id: str
    name: str = Field(min_length=1)
    description: Optional[str] = None
    duration_minutes: int = Field(gt=0)
    color: str = "#3b82f6"
    is_active: bool = True
