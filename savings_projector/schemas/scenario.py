"""Data contracts for scenario requests and responses."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from savings_projector.core.projection import (
    CompoundAnnualPercent,
    FlatAnnualIncrement,
    NoGrowth,
    ScenarioInput,
)


class IncreaseConfig(BaseModel):
    """Contribution increase applied at every 12-month boundary."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    type: Literal["fixed", "percent"]
    amount: Optional[float] = Field(
        default=None,
        description="Added to the monthly contribution per elapsed year (type=fixed).",
    )
    percent: Optional[float] = Field(
        default=None,
        description="Yearly compound increase of the monthly contribution, in percent (type=percent).",
    )

    @model_validator(mode="after")
    def ensure_value_for_type(self) -> "IncreaseConfig":
        if self.type == "fixed" and self.amount is None:
            raise ValueError("fixed increase requires amount")
        if self.type == "percent" and self.percent is None:
            raise ValueError("percent increase requires percent")
        return self


class ScenarioForm(BaseModel):
    """Inputs required to project one scenario, as the frontend form sends them."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    principal: float = Field(..., gt=0, description="Starting balance.")
    monthly: float = Field(..., gt=0, description="Contribution added at the end of each month.")
    rate: float = Field(
        ...,
        description="Annual interest rate in percent (e.g. 3 for 3%).",
    )
    years: int = Field(..., ge=1, le=100, description="Number of years to project.")
    increaseConfig: Optional[IncreaseConfig] = None

    def to_input(self) -> ScenarioInput:
        if self.increaseConfig is None:
            rule = NoGrowth()
        elif self.increaseConfig.type == "fixed":
            rule = FlatAnnualIncrement(amount=self.increaseConfig.amount)
        else:
            rule = CompoundAnnualPercent(percent=self.increaseConfig.percent)

        return ScenarioInput(
            principal=self.principal,
            monthly_contribution=self.monthly,
            annual_rate_percent=self.rate,
            horizon_years=self.years,
            growth_rule=rule,
        )

    @classmethod
    def from_input(cls, scenario_input: ScenarioInput) -> "ScenarioForm":
        """Echo a stored input back in form shape; skips the submission bounds checks."""
        rule = scenario_input.growth_rule
        if isinstance(rule, FlatAnnualIncrement):
            increase = IncreaseConfig.model_construct(type="fixed", amount=rule.amount)
        elif isinstance(rule, CompoundAnnualPercent):
            increase = IncreaseConfig.model_construct(type="percent", percent=rule.percent)
        else:
            increase = None

        return cls.model_construct(
            principal=scenario_input.principal,
            monthly=scenario_input.monthly_contribution,
            rate=scenario_input.annual_rate_percent,
            years=scenario_input.horizon_years,
            increaseConfig=increase,
        )


class Summary(BaseModel):
    finalAmount: int
    principal: float
    totalContribution: int
    totalInterest: float


class ScenarioView(BaseModel):
    """Single row of the saved scenario list."""

    ordinal: int = Field(..., ge=0)
    label: str
    description: str
    input: ScenarioForm
    summary: Summary
    data: List[int]


class ChartDataset(BaseModel):
    label: str
    data: List[int]
    borderColor: str
    backgroundColor: str


class ChartResponse(BaseModel):
    labels: List[str]
    maxMonths: int = Field(..., ge=0)
    datasets: List[ChartDataset]


class ScenarioListResponse(BaseModel):
    scenarios: List[ScenarioView]
    headline: Optional[Summary] = None
    chart: ChartResponse


class ScenarioCreatedResponse(ScenarioListResponse):
    created: ScenarioView


class ProjectionResponse(BaseModel):
    """Stateless projection of one form submission."""

    data: List[int]
    summary: Summary
    description: str
