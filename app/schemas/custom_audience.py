"""
app/schemas/custom_audience.py

Request and response schemas for custom-audience endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from app.domain.custom_audience import CustomerRecord
from app.mappers.customer_hasher import coerce_text

AUDIENCE_CREATED_MESSAGE = "Audience created. It may take up to 24 hours for matches to appear."

# Strict members keep JSON scalars as sent; text coercion happens at hashing time.
IdentifierValue = StrictStr | StrictBool | StrictInt | StrictFloat | None


class CustomerPayload(BaseModel):
    """
    One customer as sent by the caller. Every identifier is optional.
    """

    model_config = ConfigDict(extra="ignore")

    email: IdentifierValue = None
    phone: IdentifierValue = None
    fn: IdentifierValue = Field(default=None, validation_alias=AliasChoices("fn", "firstName", "first_name"))
    ln: IdentifierValue = Field(default=None, validation_alias=AliasChoices("ln", "lastName", "last_name"))

    def to_record(self) -> CustomerRecord:
        return CustomerRecord(
            email=self.email,
            phone=self.phone,
            first_name=self.fn,
            last_name=self.ln,
        )


class CustomAudienceRequest(BaseModel):
    """
    Body of `POST /api/meta/custom-audience`.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    customers: list[CustomerPayload]
    audience_id: str | None = Field(default=None, validation_alias=AliasChoices("audienceId", "audience_id"))

    @field_validator("name", mode="before")
    @classmethod
    def _scalar_name_as_text(cls, value: Any) -> Any:
        if isinstance(value, (bool, int, float)):
            return coerce_text(value)
        return value


class CustomAudienceResponse(BaseModel):
    """
    API response model for a created and populated audience.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    audience_id: str = Field(..., alias="audienceId")
    uploaded: int = Field(..., ge=0)
    message: str = AUDIENCE_CREATED_MESSAGE
