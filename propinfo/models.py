"""Pydantic models for the property_info API and stored listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

RECORD_VERSION = "1.0"


class PropertyInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    urls: list[str]
    value: int | float
    beds: str
    baths: str
    square_footage: str
    address: str
    city_state_zipcode: str
    # Zillow property detail page (external)
    detailUrl: str | None = None
    inserted_id: str | None = Field(default=None, alias="_insertedId")

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class StoredListing(PropertyInfo):
    scraped_at: datetime
    version: str = RECORD_VERSION


class ErrorResponse(BaseModel):
    error: str


def placeholder() -> PropertyInfo:
    """Harmless record returned when the city catalog can't be read."""
    return PropertyInfo(
        urls=[],
        value=0,
        beds="0",
        baths="0",
        square_footage="0",
        address="Unknown",
        city_state_zipcode="Unknown",
        detailUrl="",
    )
