"""Visited Place Schemas — create/update payloads for travel records.

Invariants:
    - county is stored in its short Chinese form; unknown counties are rejected
    - image_urls holds at most 10 photos
    - Blank ig_url becomes None
"""

from pydantic import BaseModel, Field, field_validator

from travel_map.core.counties import to_short_name
from travel_map.core.upload_rules import MAX_BATCH_COUNT


def _reconcile_county(v: str | None) -> str | None:
    if v is None:
        return v
    short = to_short_name(v)
    if short is None:
        raise ValueError(f"unknown county: {v}")
    return short


class VisitedPlaceCreate(BaseModel):
    """New travel record."""
    county: str = Field(min_length=1, max_length=50)
    note: str | None = Field(None, max_length=5000)
    ig_url: str | None = Field(None, max_length=500)
    image_url: str | None = None
    image_urls: list[str] | None = Field(None, max_length=MAX_BATCH_COUNT)
    is_public: bool = True

    @field_validator("county")
    @classmethod
    def reconcile_county(cls, v: str) -> str:
        return _reconcile_county(v)

    @field_validator("ig_url")
    @classmethod
    def blank_ig_url(cls, v: str | None) -> str | None:
        return (v.strip() or None) if v is not None else None


class VisitedPlaceUpdate(BaseModel):
    """Partial update — only fields present in the body are written."""
    county: str | None = Field(None, min_length=1, max_length=50)
    note: str | None = Field(None, max_length=5000)
    ig_url: str | None = Field(None, max_length=500)
    image_url: str | None = None
    image_urls: list[str] | None = Field(None, max_length=MAX_BATCH_COUNT)
    is_public: bool | None = None

    @field_validator("county")
    @classmethod
    def reconcile_county(cls, v: str | None) -> str | None:
        return _reconcile_county(v)

    @field_validator("ig_url")
    @classmethod
    def blank_ig_url(cls, v: str | None) -> str | None:
        return (v.strip() or None) if v is not None else None
