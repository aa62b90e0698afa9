from __future__ import annotations

import math
from typing import Annotated, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from savings_projector.logging import get_logger

logger = get_logger(__name__)


# -----------------------------
# Contribution growth rules
# -----------------------------


class NoGrowth(BaseModel):
    """Contribution stays at the base amount for the whole horizon."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"

    def contribution(self, base: float, years_elapsed: int) -> float:
        return base

    def to_record(self) -> Optional[list]:
        return None


class FlatAnnualIncrement(BaseModel):
    """contribution = base + amount * (full years elapsed)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed"] = "fixed"
    amount: float

    def contribution(self, base: float, years_elapsed: int) -> float:
        return base + self.amount * years_elapsed

    def to_record(self) -> Optional[list]:
        return ["fixed", self.amount]


class CompoundAnnualPercent(BaseModel):
    """contribution = base * (1 + percent/100)^(full years elapsed)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["percent"] = "percent"
    percent: float

    def contribution(self, base: float, years_elapsed: int) -> float:
        return base * (1 + self.percent / 100) ** years_elapsed

    def to_record(self) -> Optional[list]:
        return ["percent", self.percent]


ContributionGrowthRule = Annotated[
    Union[NoGrowth, FlatAnnualIncrement, CompoundAnnualPercent],
    Field(discriminator="kind"),
]


def growth_rule_from_record(record: Optional[Sequence]) -> Union[NoGrowth, FlatAnnualIncrement, CompoundAnnualPercent]:
    """Inverse of ``rule.to_record()``: None, ["fixed", amount] or ["percent", percent]."""
    if record is None:
        return NoGrowth()
    kind, value = record
    if kind == "fixed":
        return FlatAnnualIncrement(amount=value)
    if kind == "percent":
        return CompoundAnnualPercent(percent=value)
    raise ValueError(f"unknown growth rule kind: {kind!r}")


# -----------------------------
# Scenario values
# -----------------------------


class ScenarioInput(BaseModel):
    """
    One projection definition. Validation happens before construction
    (see schemas.scenario.ScenarioForm); the engine trusts these values.
    """

    model_config = ConfigDict(frozen=True)

    principal: float
    monthly_contribution: float
    annual_rate_percent: float
    horizon_years: int
    growth_rule: ContributionGrowthRule = Field(default_factory=NoGrowth)

    @property
    def horizon_months(self) -> int:
        return self.horizon_years * 12

    def to_record(self) -> list:
        """Mapping-free persisted form: [principal, monthly, rate, years, rule]."""
        return [
            self.principal,
            self.monthly_contribution,
            self.annual_rate_percent,
            self.horizon_years,
            self.growth_rule.to_record(),
        ]

    @classmethod
    def from_record(cls, record: Sequence) -> "ScenarioInput":
        principal, monthly, rate, years, rule = record
        return cls(
            principal=principal,
            monthly_contribution=monthly,
            annual_rate_percent=rate,
            horizon_years=years,
            growth_rule=growth_rule_from_record(rule),
        )


class ScenarioResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_balances: Tuple[int, ...]
    final_balance: int
    total_contributed: int
    # residual: final_balance - principal - total_contributed; integral whenever principal is
    total_interest_earned: float


class ProjectionSummary(BaseModel):
    """Headline figures shown next to the chart."""

    final_balance: int
    principal: float
    total_contributed: int
    total_interest_earned: float


# -----------------------------
# Engine
# -----------------------------


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def contribution_schedule(scenario: ScenarioInput) -> List[float]:
    """Contribution paid in each month of the horizon, before rounding."""
    return [
        scenario.growth_rule.contribution(scenario.monthly_contribution, month // 12)
        for month in range(scenario.horizon_months)
    ]


def project(scenario: ScenarioInput) -> ScenarioResult:
    """
    Build the month-by-month balance series for one scenario.

    Order of operations (per month):
      1) Accrue one month of interest on the balance carried in.
      2) Add this month's contribution (no interest on it this month).
      3) Record the balance rounded half-up to whole currency units.

    Interest earned is the residual of the rounded totals, so
    final_balance == principal + total_contributed + total_interest_earned
    holds exactly even though per-month rounding is lossy.
    """
    monthly_rate = scenario.annual_rate_percent / 100 / 12

    balance = float(scenario.principal)
    contributed = 0.0
    balances: List[int] = []

    for amount in contribution_schedule(scenario):
        balance = balance * (1 + monthly_rate) + amount
        contributed += amount
        balances.append(round_half_up(balance))

    final_balance = balances[-1]
    total_contributed = round_half_up(contributed)

    logger.debug(
        "projection_completed",
        months=len(balances),
        growth_rule=scenario.growth_rule.kind,
        final_balance=final_balance,
    )

    return ScenarioResult(
        monthly_balances=tuple(balances),
        final_balance=final_balance,
        total_contributed=total_contributed,
        total_interest_earned=final_balance - scenario.principal - total_contributed,
    )


def summarize(scenario: ScenarioInput, result: ScenarioResult) -> ProjectionSummary:
    return ProjectionSummary(
        final_balance=result.final_balance,
        principal=scenario.principal,
        total_contributed=result.total_contributed,
        total_interest_earned=result.total_interest_earned,
    )


__all__ = [
    "NoGrowth",
    "FlatAnnualIncrement",
    "CompoundAnnualPercent",
    "ContributionGrowthRule",
    "growth_rule_from_record",
    "ScenarioInput",
    "ScenarioResult",
    "ProjectionSummary",
    "round_half_up",
    "contribution_schedule",
    "project",
    "summarize",
]
