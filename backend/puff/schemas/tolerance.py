"""
Puff Backend: Tolerance Break Schemas
=====================================

What:  Request body for starting a break and the computed status/guide
       responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from puff.schemas.common import clean_optional_text


class ToleranceBreakStart(BaseModel):
    target_days: int = Field(default=7, ge=1, le=365)
    reason: Optional[str] = Field(default=None, max_length=280)

    @field_validator("reason")
    @classmethod
    def clean_reason(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)


class Milestone(BaseModel):
    day: int
    title: str
    description: str
    reached: bool = False


class ToleranceBreakStatus(BaseModel):
    """
    Progress of the current break, computed at request time.

    days_completed and hours_completed are truncated, never rounded up, so a
    break started 23h59m ago is still on day 0.
    """
    start_date: datetime
    target_days: int
    reason: Optional[str] = None
    target_date: datetime
    days_completed: int
    hours_completed: int
    progress_percent: float = Field(ge=0, le=100)
    completed: bool
    current_milestone: Milestone
    timeline: List[Milestone]


class ToleranceGuide(BaseModel):
    durations: List[int]
    coping_tips: List[str]
    timeline: List[Milestone]
