"""
ESG metric definitions.

Every benchmarked metric declares its display label, unit, pillar and
direction. Raw metrics come straight from the company record; derived
ratios are computed on read (see sector_benchmarks.compute_derived_metrics).
"""
from dataclasses import dataclass
from typing import Literal

Pillar = Literal["environmental", "social", "governance"]

PILLARS: tuple[Pillar, ...] = ("environmental", "social", "governance")


@dataclass(frozen=True)
class MetricDefinition:
    label: str
    unit: str
    pillar: Pillar
    lower_is_better: bool


METRICS: dict[str, MetricDefinition] = {
    "scope_1":                       MetricDefinition("Scope 1 Emissions", "tCO₂e", "environmental", True),
    "scope_2":                       MetricDefinition("Scope 2 Emissions", "tCO₂e", "environmental", True),
    "emissions_intensity":           MetricDefinition("Emissions Intensity", "tCO₂e/unit", "environmental", True),
    "renewable_energy_pct":          MetricDefinition("Renewable Energy %", "%", "environmental", False),
    "water_consumption":             MetricDefinition("Water Consumption", "KL", "environmental", True),
    "total_waste":                   MetricDefinition("Total Waste", "MT", "environmental", True),
    "gender_diversity_pct":          MetricDefinition("Gender Diversity", "%", "social", False),
    "board_women_percent":           MetricDefinition("Board Women %", "%", "social", False),
    "ltifr":                         MetricDefinition("LTIFR", "rate", "social", True),
    "employee_turnover_rate":        MetricDefinition("Employee Turnover", "%", "social", True),
    "pay_equity_ratio":              MetricDefinition("Pay Equity Ratio", "ratio", "social", False),
    "independent_directors_percent": MetricDefinition("Independent Directors", "%", "governance", False),
    "data_breaches":                 MetricDefinition("Data Breaches", "count", "governance", True),
    "net_zero_target_year":          MetricDefinition("Net Zero Target Year", "year", "governance", True),
}

# Metrics plotted on the radar profile, in display order
RADAR_METRICS: tuple[str, ...] = (
    "emissions_intensity",
    "renewable_energy_pct",
    "water_consumption",
    "gender_diversity_pct",
    "board_women_percent",
    "ltifr",
    "independent_directors_percent",
    "pay_equity_ratio",
)

# Columns of the peer heatmap
HEATMAP_METRICS: tuple[str, ...] = (
    "scope_1",
    "scope_2",
    "renewable_energy_pct",
    "water_consumption",
    "gender_diversity_pct",
    "board_women_percent",
    "ltifr",
    "employee_turnover_rate",
    "independent_directors_percent",
    "data_breaches",
)


def get_metric(key: str) -> MetricDefinition:
    """Look up a metric definition, raising ValueError for unknown keys."""
    definition = METRICS.get(key)
    if definition is None:
        raise ValueError(f"Unknown metric: {key}")
    return definition
