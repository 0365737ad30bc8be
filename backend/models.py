"""Canonical record shapes shared by the search and recommendation endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

AvailabilityStatus = Literal["available", "on_hold", "checked_out", "unknown"]

MAX_BRANCH_HOLDINGS = 5


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class BranchHolding(CamelModel):
    branch: str
    total_copies: int = 0
    available_copies: int = 0
    status: AvailabilityStatus = "unknown"

    @field_validator("total_copies", "available_copies")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        return max(v, 0)

    @model_validator(mode="after")
    def _clamp_available(self):
        if self.available_copies > self.total_copies:
            self.available_copies = self.total_copies
        return self


class AvailabilityInfo(CamelModel):
    status: AvailabilityStatus = "unknown"
    total_copies: int = 0
    available_copies: int = 0
    message: str = ""
    branch_holdings: list[BranchHolding] = Field(default_factory=list)

    @field_validator("total_copies", "available_copies")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        return max(v, 0)

    @field_validator("branch_holdings")
    @classmethod
    def _cap_holdings(cls, v: list[BranchHolding]) -> list[BranchHolding]:
        return v[:MAX_BRANCH_HOLDINGS]

    @model_validator(mode="after")
    def _clamp_available(self):
        # Upstream holdings sometimes report more available copies than exist.
        if self.available_copies > self.total_copies:
            self.available_copies = self.total_copies
        return self


class BookRecord(CamelModel):
    id: str
    title: str = "Unknown Title"
    author: str = "Unknown Author"
    isbn: str | None = None
    publish_year: int | None = None
    call_number: str | None = None
    format: str = "Book"
    description: str = ""
    availability: AvailabilityInfo = Field(default_factory=AvailabilityInfo)
    branch: str = "Multiple Locations"
    hold_url: str = ""
    catalog_url: str = ""
    source: str
    relevance_score: int | None = None
    note: str | None = None

    def to_json(self) -> dict:
        data = super().to_json()
        # Only fallback records carry a score or a note.
        for key in ("relevanceScore", "note"):
            if data[key] is None:
                del data[key]
        return data


class RecommendationRecord(BaseModel):
    title: str = ""
    author: str = ""
    description: str = ""
    reason: str = ""
    genre: str = ""


# --- Request models ---

class SearchRequest(BaseModel):
    query: str = ""
    branch: str | None = None


class PriorResult(BaseModel):
    title: str = ""
    author: str = ""


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    search_results: list[PriorResult] = Field(default_factory=list, alias="searchResults")
