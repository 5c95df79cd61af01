"""Data contracts for the persisted query history."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from inflation_backend.core.calculator import Granularity, SeriesPoint


class QueryRecord(BaseModel):
    """One saved calculation, inputs and results flattened."""

    id: int
    amount_nominal: float
    inflation_rate: float
    trea_rate: Optional[float] = None
    years: float
    granularity: Granularity
    real_value: float
    absolute_loss: float
    loss_percent: float
    future_value_with_interest: float
    series: Optional[List[SeriesPoint]] = None
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: str


class HistoryPage(BaseModel):
    items: List[QueryRecord]
    total: int = Field(..., ge=0)
    limit: int
    offset: int


class QueryStatistics(BaseModel):
    total_queries: int = 0
    avg_amount_nominal: float = 0.0
    avg_inflation_rate: float = 0.0
    avg_loss_percent: float = 0.0
    first_query: Optional[str] = None
    last_query: Optional[str] = None


class HistoryPageQuery(BaseModel):
    """Query-string parameters for paginated history."""

    limit: int = Field(50, ge=1)
    offset: int = Field(0, ge=0)


class RecentQuery(BaseModel):
    limit: int = Field(10, ge=1, le=100)


class DateRangeQuery(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def ensure_ordered(self) -> "DateRangeQuery":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self
