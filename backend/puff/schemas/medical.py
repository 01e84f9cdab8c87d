"""
Puff Backend: Medical Tracker Schemas
=====================================

What:  Symptom log bodies and the relief-insight responses.
How:   A log is created with severity_before only; the after-medicating
       fields arrive later through PATCH.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from puff.catalog import SYMPTOM_IDS, SYMPTOMS, ConsumptionMethod
from puff.schemas.common import clean_optional_text


class SymptomLogCreate(BaseModel):
    symptom: str = Field(description="Symptom id from the catalog, e.g. 'pain'")
    severity_before: int = Field(default=5, ge=1, le=10)
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("symptom")
    @classmethod
    def validate_symptom(cls, v: str) -> str:
        if v not in SYMPTOM_IDS:
            valid = ", ".join(symptom["id"] for symptom in SYMPTOMS)
            raise ValueError(f"Unknown symptom '{v}'. Must be one of: {valid}")
        return v

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)


class SymptomLogUpdate(BaseModel):
    """Body of PATCH /api/medical/logs/{id}, sent after medicating."""
    model_config = {"use_enum_values": True}

    severity_after: Optional[int] = Field(default=None, ge=1, le=10)
    strain_used: Optional[str] = Field(default=None, max_length=120)
    method: Optional[ConsumptionMethod] = None
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("strain_used", "notes")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)


class SymptomLogResponse(BaseModel):
    id: uuid.UUID
    symptom: str
    severity_before: int
    severity_after: Optional[int] = None
    strain_used: Optional[str] = None
    method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SymptomInsight(BaseModel):
    """Best-relief strain for one symptom."""
    symptom: str
    label: str
    best_strain: str
    avg_relief: float = Field(description="Mean drop in severity, always > 0")


class MedicalInsightsResponse(BaseModel):
    insights: List[SymptomInsight]
