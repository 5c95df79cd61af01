"""Closed-form inflation formulas and the effect calculation built on them.

Rates passed to the formula helpers are decimal fractions (0.065 for 6.5%).
Only `calculate_effect` takes percentages; it converts them once.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class InvalidArgument(ValueError):
    """A formula input violates its precondition."""


class Granularity(str, Enum):
    NONE = "none"
    YEARLY = "yearly"
    QUARTERLY = "quarterly"

    @property
    def period_length(self) -> float:
        if self == Granularity.QUARTERLY:
            return 0.25
        return 1.0


class CalculationInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    nominal_amount: float
    inflation_rate_percent: float
    years: float
    granularity: Granularity = Granularity.NONE
    trea_rate_percent: Optional[float] = None


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    elapsed_years: float
    real_value: float
    loss_percent: float


class CalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    real_value: float
    absolute_loss: float
    loss_percent: float
    future_value_with_interest: float
    series: Optional[List[SeriesPoint]] = None


def _require_non_negative_rate(rate: float, years: float) -> None:
    if rate < 0:
        raise InvalidArgument("inflation rate cannot be negative")
    if years < 0:
        raise InvalidArgument("years cannot be negative")


def _require_positive_amount(nominal_amount: float) -> None:
    if nominal_amount <= 0:
        raise InvalidArgument("nominal amount must be greater than zero")


def _compound(rate: float, years: float) -> float:
    try:
        growth = (1 + rate) ** years
    except OverflowError:
        raise InvalidArgument(f"compounding {rate} over {years} years is out of range") from None
    if not math.isfinite(growth):
        raise InvalidArgument(f"compounding {rate} over {years} years is out of range")
    return growth


def discount_factor(inflation_rate: float, years: float) -> float:
    _require_non_negative_rate(inflation_rate, years)
    return _compound(inflation_rate, years)


def real_value(nominal_amount: float, inflation_rate: float, years: float) -> float:
    """Present value of `nominal_amount` in today's purchasing power."""
    _require_positive_amount(nominal_amount)
    return nominal_amount / discount_factor(inflation_rate, years)


def absolute_loss(nominal_amount: float, real: float) -> float:
    return nominal_amount - real


def loss_percentage(inflation_rate: float, years: float) -> float:
    """Cumulative purchasing-power loss as a fraction in [0, 1)."""
    return 1 - 1 / discount_factor(inflation_rate, years)


def future_value_with_interest(nominal_amount: float, trea_rate: float, years: float) -> float:
    _require_positive_amount(nominal_amount)
    if trea_rate < 0:
        raise InvalidArgument("TREA rate cannot be negative")
    future = nominal_amount * _compound(trea_rate, years)
    if not math.isfinite(future):
        raise InvalidArgument("future value is out of range")
    return future


def real_value_with_interest(
    nominal_amount: float,
    inflation_rate: float,
    trea_rate: float,
    years: float,
) -> float:
    """Grow nominally at the TREA, then deflate by inflation over the same horizon."""
    future = future_value_with_interest(nominal_amount, trea_rate, years)
    return future / discount_factor(inflation_rate, years)


def net_loss(nominal_amount: float, real_with_interest: float) -> float:
    # negative means a net gain in real terms
    return nominal_amount - real_with_interest


def net_loss_rate(inflation_rate: float, trea_rate: float, years: float) -> float:
    """
    Loss fraction when the account earns interest.

    The rate differential is compounded as if it were a standalone inflation
    rate. This is an approximation of the combined process, not the exact
    ratio of the two compounding factors. Floored at zero when the TREA meets
    or beats inflation.
    """
    net = inflation_rate - trea_rate
    if net <= 0:
        return 0.0
    return 1 - 1 / _compound(net, years)


def _round_money(value: float) -> float:
    return round(value, 2)


def _round_percent(fraction: float) -> float:
    return round(fraction * 100, 2)


def generate_series(
    nominal_amount: float,
    inflation_rate: float,
    years: float,
    granularity: Granularity,
    trea_rate: float = 0.0,
) -> List[SeriesPoint]:
    """
    One point per period up to `years`.

    The last period is clamped to `years`, so a partial final period is
    reported at the exact horizon (2.5 years yearly -> 1, 2, 2.5). Each point
    is an independent present-value calculation at its elapsed time.
    """
    _require_positive_amount(nominal_amount)
    granularity = Granularity(granularity)
    if granularity == Granularity.NONE:
        return []

    period_length = granularity.period_length
    periods = math.ceil(years / period_length)

    points: List[SeriesPoint] = []
    for index in range(1, periods + 1):
        elapsed = min(index * period_length, years)
        if trea_rate > 0:
            value = real_value_with_interest(nominal_amount, inflation_rate, trea_rate, elapsed)
            loss = net_loss_rate(inflation_rate, trea_rate, elapsed)
        else:
            value = real_value(nominal_amount, inflation_rate, elapsed)
            loss = loss_percentage(inflation_rate, elapsed)

        points.append(
            SeriesPoint(
                index=index,
                elapsed_years=elapsed,
                real_value=_round_money(value),
                loss_percent=_round_percent(loss),
            )
        )

    return points


def calculate_effect(calculation: CalculationInput) -> CalculationResult:
    """
    Entry point: percentages in, rounded result out.

    A positive TREA selects the interest-aware formulas; otherwise the plain
    inflation formulas are used and the future value equals the nominal
    amount. Any failure raises `InvalidArgument` before a result is built.
    """
    trea_percent = calculation.trea_rate_percent or 0.0
    if trea_percent < 0:
        raise InvalidArgument("TREA rate cannot be negative")

    inflation_rate = calculation.inflation_rate_percent / 100
    trea_rate = trea_percent / 100
    nominal = calculation.nominal_amount
    years = calculation.years

    if trea_percent > 0:
        future = future_value_with_interest(nominal, trea_rate, years)
        real = real_value_with_interest(nominal, inflation_rate, trea_rate, years)
        loss = net_loss(nominal, real)
        loss_fraction = net_loss_rate(inflation_rate, trea_rate, years)
    else:
        real = real_value(nominal, inflation_rate, years)
        loss = absolute_loss(nominal, real)
        loss_fraction = loss_percentage(inflation_rate, years)
        future = nominal

    series: Optional[List[SeriesPoint]] = None
    if calculation.granularity != Granularity.NONE:
        series = generate_series(nominal, inflation_rate, years, calculation.granularity, trea_rate)

    return CalculationResult(
        real_value=_round_money(real),
        absolute_loss=_round_money(loss),
        loss_percent=_round_percent(loss_fraction),
        future_value_with_interest=_round_money(future),
        series=series,
    )


__all__ = [
    "InvalidArgument",
    "Granularity",
    "CalculationInput",
    "SeriesPoint",
    "CalculationResult",
    "discount_factor",
    "real_value",
    "absolute_loss",
    "loss_percentage",
    "future_value_with_interest",
    "real_value_with_interest",
    "net_loss",
    "net_loss_rate",
    "generate_series",
    "calculate_effect",
]
