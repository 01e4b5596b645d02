from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampedResponse(BaseModel):
    """Responses stamped with the moment they were generated."""

    timestamp: datetime = Field(default_factory=utc_now)

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """ISO8601 in UTC with milliseconds and a Z suffix, e.g. 2025-12-01T14:03:22.125Z"""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StatsResponse(TimestampedResponse):
    model_config = ConfigDict(populate_by_name=True)

    total_enrolled: int = Field(ge=0, alias="totalInscritos")
    total_paid: int = Field(ge=0, alias="totalPagados")


class AreaBreakdownEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    area: str
    enrolled_count: int = Field(ge=0, alias="total_inscritos")


class AreaBreakdownResponse(TimestampedResponse):
    areas: List[AreaBreakdownEntry] = []


class HealthResponse(TimestampedResponse):
    status: str = "OK"


class ErrorResponse(BaseModel):
    error: str  # category, e.g. "Error al obtener datos"
    message: str  # underlying driver message
