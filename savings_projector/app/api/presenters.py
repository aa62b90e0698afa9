"""Shape core values into the JSON the chart/list frontend renders."""

from typing import List, Optional

from savings_projector.core.projection import (
    CompoundAnnualPercent,
    FlatAnnualIncrement,
    ProjectionSummary,
    ScenarioInput,
    ScenarioResult,
    summarize,
)
from savings_projector.domain.scenarios import ChartSeries, Scenario, ScenarioSet
from savings_projector.schemas.scenario import (
    ChartDataset,
    ChartResponse,
    ProjectionResponse,
    ScenarioForm,
    ScenarioListResponse,
    ScenarioView,
    Summary,
)

# border / translucent fill pairs; series colours cycle over this list
PALETTE = [
    {"border": "#3b82f6", "background": "rgba(59, 130, 246, 0.1)"},
    {"border": "#10b981", "background": "rgba(16, 185, 129, 0.1)"},
    {"border": "#f59e0b", "background": "rgba(245, 158, 11, 0.1)"},
    {"border": "#ef4444", "background": "rgba(239, 68, 68, 0.1)"},
    {"border": "#8b5cf6", "background": "rgba(139, 92, 246, 0.1)"},
]


def axis_labels(max_months: int) -> List[str]:
    """
    One label per month of the common time axis.

    Year boundaries get "Y<n>", other quarter starts get "Y<n> M<m>", and
    the remaining months stay blank so the axis is not crowded.
    """
    labels: List[str] = []
    for m in range(1, max_months + 1):
        year = (m - 1) // 12
        month = (m - 1) % 12 + 1
        if m % 12 == 1:
            labels.append(f"Y{year}")
        elif m % 3 == 1:
            labels.append(f"Y{year} M{month}")
        else:
            labels.append("")
    return labels


def _number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def describe_growth_rule(rule) -> str:
    if isinstance(rule, FlatAnnualIncrement):
        return f"+{_number(rule.amount)}/month every year"
    if isinstance(rule, CompoundAnnualPercent):
        return f"+{_number(rule.percent)}% every year"
    return "No increase"


def summary_payload(summary: ProjectionSummary) -> Summary:
    return Summary(
        finalAmount=summary.final_balance,
        principal=summary.principal,
        totalContribution=summary.total_contributed,
        totalInterest=summary.total_interest_earned,
    )


def projection_payload(scenario_input: ScenarioInput, result: ScenarioResult) -> ProjectionResponse:
    return ProjectionResponse(
        data=list(result.monthly_balances),
        summary=summary_payload(summarize(scenario_input, result)),
        description=describe_growth_rule(scenario_input.growth_rule),
    )


def scenario_payload(scenario: Scenario) -> ScenarioView:
    return ScenarioView(
        ordinal=scenario.ordinal,
        label=scenario.label,
        description=describe_growth_rule(scenario.input.growth_rule),
        input=ScenarioForm.from_input(scenario.input),
        summary=summary_payload(summarize(scenario.input, scenario.result)),
        data=list(scenario.result.monthly_balances),
    )


def chart_payload(chart: ChartSeries) -> ChartResponse:
    datasets = []
    for series in chart.series:
        color = PALETTE[series.color_index % len(PALETTE)]
        datasets.append(
            ChartDataset(
                label=series.label,
                data=series.points,
                borderColor=color["border"],
                backgroundColor=color["background"],
            )
        )
    return ChartResponse(
        labels=axis_labels(chart.max_months),
        maxMonths=chart.max_months,
        datasets=datasets,
    )


def headline_payload(headline: Optional[Scenario]) -> Optional[Summary]:
    # an empty set clears the summary figures
    if headline is None:
        return None
    return summary_payload(summarize(headline.input, headline.result))


def scenario_list_payload(scenario_set: ScenarioSet) -> ScenarioListResponse:
    return ScenarioListResponse(
        scenarios=[scenario_payload(scenario) for scenario in scenario_set.list()],
        headline=headline_payload(scenario_set.headline()),
        chart=chart_payload(scenario_set.derive_chart_series()),
    )
