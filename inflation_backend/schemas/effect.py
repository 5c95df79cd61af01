"""Data contracts for the inflation effect endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from inflation_backend.core.calculator import (
    CalculationInput,
    CalculationResult,
    Granularity,
    SeriesPoint,
)

MAX_NOMINAL_AMOUNT = 999_999_999


class EffectRequest(BaseModel):
    """Inputs accepted by POST /inflation/effect."""

    model_config = ConfigDict(extra="forbid")

    amount_nominal: float = Field(
        ...,
        gt=0,
        le=MAX_NOMINAL_AMOUNT,
        allow_inf_nan=False,
        description="Initial savings amount.",
    )
    inflation_rate: float = Field(
        ...,
        ge=0,
        le=100,
        allow_inf_nan=False,
        description="Annual inflation rate in percent (e.g. 6.5).",
    )
    years: float = Field(..., ge=0, le=100, allow_inf_nan=False)
    granularity: Granularity = Granularity.NONE
    trea_rate: Optional[float] = Field(
        None,
        ge=0,
        allow_inf_nan=False,
        description="Annual TREA in percent; overrides the account lookup.",
    )
    account_type: Optional[str] = None
    institution_id: Optional[str] = None

    @model_validator(mode="after")
    def ensure_lookup_pair(self) -> "EffectRequest":
        if (self.account_type is None) != (self.institution_id is None):
            raise ValueError("account_type and institution_id must be given together")
        return self

    @property
    def wants_rate_lookup(self) -> bool:
        return self.trea_rate is None and self.account_type is not None

    def to_input(self, trea_rate: Optional[float] = None) -> CalculationInput:
        return CalculationInput(
            nominal_amount=self.amount_nominal,
            inflation_rate_percent=self.inflation_rate,
            years=self.years,
            granularity=self.granularity,
            trea_rate_percent=trea_rate if trea_rate is not None else self.trea_rate,
        )


class EffectResponse(BaseModel):
    """Echoed inputs plus the rounded calculation result."""

    query_id: Optional[int] = None
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

    @classmethod
    def from_calculation(
        cls,
        calculation: CalculationInput,
        result: CalculationResult,
        query_id: Optional[int] = None,
    ) -> "EffectResponse":
        return cls(
            query_id=query_id,
            amount_nominal=calculation.nominal_amount,
            inflation_rate=calculation.inflation_rate_percent,
            trea_rate=calculation.trea_rate_percent or None,
            years=calculation.years,
            granularity=calculation.granularity,
            real_value=result.real_value,
            absolute_loss=result.absolute_loss,
            loss_percent=result.loss_percent,
            future_value_with_interest=result.future_value_with_interest,
            series=result.series,
        )

    def to_json(self) -> dict:
        # series is omitted entirely when no granularity was requested
        exclude = {"series"} if self.series is None else None
        return self.model_dump(mode="json", exclude=exclude)
