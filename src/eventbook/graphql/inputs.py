"""
Normalization of mutation inputs.

GraphQL validation has already checked field names and required fields when
the input arrives through the schema; these models normalize the values
(price as a number, date as an aware UTC timestamp) and also guard callers
that invoke the resolvers directly.
"""

from datetime import UTC, datetime
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, Field, field_validator

from ..errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Largest magnitude the Numeric(12, 2) price column holds, exclusive
PRICE_LIMIT = 10**10


class EventPayload(BaseModel):
    title: str
    description: str
    price: float = Field(allow_inf_nan=False)
    date: datetime

    @field_validator("price")
    @classmethod
    def round_price(cls, value: float) -> float:
        value = round(value, 2)
        if abs(value) >= PRICE_LIMIT:
            raise ValueError(f"price must be between -{PRICE_LIMIT} and {PRICE_LIMIT}")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                # Date-only strings mean midnight UTC
                return datetime.fromisoformat(value.strip())
            except ValueError as e:
                raise ValueError("date must be an ISO-8601 date or timestamp") from e
        return value

    @field_validator("date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        try:
            return value.astimezone(UTC)
        except OverflowError as e:
            raise ValueError("date out of range") from e


class UserPayload(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("email must not be blank")
        return value


def parse_input(model: type[ModelT], data: Any) -> ModelT:
    """
    Validate a strawberry input object or mapping against ``model``.

    Raises:
        ValidationError: Naming the first offending field
    """
    try:
        return model.model_validate(data, from_attributes=True)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        message = f"Invalid {field}: {first['msg']}" if field else first["msg"]
        raise ValidationError(message, field=field) from e
