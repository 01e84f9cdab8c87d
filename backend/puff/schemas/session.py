"""
Puff Backend: Consumption Session Schemas
=========================================

What:  Request/response models for logging and reviewing sessions.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from puff.catalog import ConsumptionMethod, normalize_effects
from puff.schemas.common import clean_optional_text, reject_null


class SessionCreate(BaseModel):
    """
    Body of POST /api/sessions.

    `strain_id` must reference one of the caller's strains; the strain's
    current name is copied onto the session.
    """
    model_config = {"use_enum_values": True}

    strain_id: uuid.UUID
    method: ConsumptionMethod = Field(default=ConsumptionMethod.SMOKE)
    amount: Optional[str] = Field(default=None, max_length=60)
    mood_before: int = Field(default=3, ge=1, le=5)
    mood_after: Optional[int] = Field(default=None, ge=1, le=5)
    effects: List[str] = Field(default_factory=list)
    duration: Optional[int] = Field(default=None, ge=0, le=1440, description="Minutes")
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("amount", "notes")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)

    @field_validator("effects")
    @classmethod
    def validate_effects(cls, v: List[str]) -> List[str]:
        return normalize_effects(v)


class SessionUpdate(BaseModel):
    """
    Body of PATCH /api/sessions/{id}.

    This is how the "how do you feel now?" step is recorded: the client
    logs the session first and patches mood_after and effects later.
    """
    model_config = {"use_enum_values": True}

    method: Optional[ConsumptionMethod] = None
    amount: Optional[str] = Field(default=None, max_length=60)
    mood_before: Optional[int] = Field(default=None, ge=1, le=5)
    mood_after: Optional[int] = Field(default=None, ge=1, le=5)
    effects: Optional[List[str]] = None
    duration: Optional[int] = Field(default=None, ge=0, le=1440)
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("method", "mood_before")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)

    @field_validator("amount", "notes")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)

    @field_validator("effects")
    @classmethod
    def validate_effects(cls, v: Optional[List[str]]) -> List[str]:
        return normalize_effects(reject_null(v, "effects"))


class SessionResponse(BaseModel):
    id: uuid.UUID
    strain_id: Optional[uuid.UUID] = None
    strain_name: str
    method: str
    amount: Optional[str] = None
    mood_before: int
    mood_after: Optional[int] = None
    effects: List[str]
    duration: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionListResponse(BaseModel):
    sessions: List[SessionResponse]
    total_count: int
    next_cursor: Optional[str] = None
    has_more: bool
