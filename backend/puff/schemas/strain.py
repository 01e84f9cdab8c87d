"""
Puff Backend: Strain Request/Response Schemas
=============================================

What:  Pydantic models defining the strain API contract.
How:   Create/Update bodies normalize input (trimmed names, blank text to
       null, de-duplicated effects); responses are built from ORM rows with
       from_attributes.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from puff.catalog import StrainType, normalize_effects
from puff.schemas.common import clean_optional_text, reject_null


class StrainCreate(BaseModel):
    """Body of POST /api/strains. Only `name` is required."""
    model_config = {"use_enum_values": True}

    name: str = Field(max_length=120, description="Strain name, e.g. 'Blue Dream'")
    type: StrainType = Field(default=StrainType.HYBRID)
    thc_percent: Optional[float] = Field(default=None, ge=0, le=100)
    cbd_percent: Optional[float] = Field(default=None, ge=0, le=100)
    rating: int = Field(default=3, ge=1, le=5, description="1-5 stars")
    effects: List[str] = Field(default_factory=list, description="Effect names from the catalog")
    notes: Optional[str] = Field(default=None, max_length=5000)
    photo_url: Optional[str] = Field(default=None, max_length=2048)
    dispensary: Optional[str] = Field(default=None, max_length=120)
    price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    favorite: bool = False
    would_buy_again: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Please enter a strain name")
        return name

    @field_validator("notes", "dispensary", "photo_url")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)

    @field_validator("effects")
    @classmethod
    def validate_effects(cls, v: List[str]) -> List[str]:
        return normalize_effects(v)


class StrainUpdate(BaseModel):
    """
    Body of PATCH /api/strains/{id}.

    Only fields present in the body are changed. Nullable columns accept an
    explicit null to clear them; the rest reject null.
    """
    model_config = {"use_enum_values": True}

    name: Optional[str] = Field(default=None, max_length=120)
    type: Optional[StrainType] = None
    thc_percent: Optional[float] = Field(default=None, ge=0, le=100)
    cbd_percent: Optional[float] = Field(default=None, ge=0, le=100)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    effects: Optional[List[str]] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    photo_url: Optional[str] = Field(default=None, max_length=2048)
    dispensary: Optional[str] = Field(default=None, max_length=120)
    price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    favorite: Optional[bool] = None
    would_buy_again: Optional[bool] = None

    @field_validator("type", "rating", "favorite", "would_buy_again")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        name = reject_null(v, "name").strip()
        if not name:
            raise ValueError("Please enter a strain name")
        return name

    @field_validator("notes", "dispensary", "photo_url")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional_text(v)

    @field_validator("effects")
    @classmethod
    def validate_effects(cls, v: Optional[List[str]]) -> List[str]:
        return normalize_effects(reject_null(v, "effects"))


class StrainResponse(BaseModel):
    """Full representation of a strain."""
    id: uuid.UUID
    name: str
    type: str
    thc_percent: Optional[float] = None
    cbd_percent: Optional[float] = None
    rating: int
    effects: List[str]
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    dispensary: Optional[str] = None
    price: Optional[float] = None
    purchase_date: Optional[date] = None
    favorite: bool
    would_buy_again: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class StrainListResponse(BaseModel):
    """
    Paginated response wrapper for GET /api/strains.

    How the cursor works:
        - next_cursor: "<created_at>,<id>" of the last item in the current page
        - The client sends it back as ?cursor= to get the next page
    """
    strains: List[StrainResponse]
    total_count: int = Field(description="Total number of strains matching filters")
    next_cursor: Optional[str] = Field(
        default=None,
        description="Cursor for next page (created_at and id of the last item). Null if no more pages.",
    )
    has_more: bool
