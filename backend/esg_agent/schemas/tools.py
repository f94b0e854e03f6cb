"""Tool arguments and results exchanged with the chat model.

Each tool result carries a `tool` discriminator so results form a closed
union that the chart catalog can dispatch on.
"""
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from esg_agent.schemas.benchmark import (
    CompanyBenchmark,
    PeerRating,
    PillarScores,
    RankedCompany,
    SectorStatistic,
)
from esg_agent.schemas.company import CompanySummary
from esg_agent.schemas.recommendation import Recommendation


# --- Arguments ---

class NoArgs(BaseModel):
    pass


class CompanyArgs(BaseModel):
    company_id: str | None = Field(default=None, description="Id of the company. Defaults to the selected company")


class MetricRankingArgs(BaseModel):
    metric: str = Field(
        description="One of: scope_1, scope_2, emissions_intensity, renewable_energy_pct, water_consumption, "
        "total_waste, gender_diversity_pct, board_women_percent, ltifr, employee_turnover_rate, "
        "pay_equity_ratio, independent_directors_percent, data_breaches, net_zero_target_year"
    )
    sector: str | None = Field(default=None, description="Optional: restrict the ranking to one sector")


class SectorStatsArgs(BaseModel):
    sector: str | None = Field(default=None, description="Optional: restrict the statistics to one sector")


class PeerComparisonArgs(BaseModel):
    selected_company_name: str | None = Field(
        default=None, description="Optional: company name to highlight in the comparison charts"
    )


class ChartSelectionArgs(BaseModel):
    chart_keys: list[str] = Field(
        default_factory=list,
        description="Array of chart keys to display. Pick only what is relevant to the question.",
    )


# --- Results ---

class CompaniesResult(BaseModel):
    tool: Literal["get_companies"] = "get_companies"
    companies: list[CompanySummary] = []
    count: int = 0
    summary: str


class BenchmarkResult(BaseModel):
    tool: Literal["get_company_benchmark"] = "get_company_benchmark"
    benchmark: CompanyBenchmark
    summary: str


class MetricRankingResult(BaseModel):
    tool: Literal["get_metric_ranking"] = "get_metric_ranking"
    metric: str
    label: str
    unit: str
    lower_is_better: bool
    ranked: list[RankedCompany] = []
    stats: SectorStatistic
    summary: str


class SectorStatsResult(BaseModel):
    tool: Literal["get_sector_stats"] = "get_sector_stats"
    stats: dict[str, SectorStatistic]
    summary: str


class PeerComparisonResult(BaseModel):
    tool: Literal["get_peer_comparison"] = "get_peer_comparison"
    companies: list[PeerRating] = []
    selected_name: str | None = None
    summary: str


class ReportResult(BaseModel):
    tool: Literal["generate_report"] = "generate_report"
    success: bool = True
    summary: str


class RecommendationsResult(BaseModel):
    tool: Literal["get_recommendations"] = "get_recommendations"
    recommendations: list[Recommendation]
    company_name: str | None = None
    current_scores: PillarScores
    percentiles: dict[str, int | None]
    sector_stats: dict[str, SectorStatistic]
    summary: str


ToolResult = Annotated[
    CompaniesResult
    | BenchmarkResult
    | MetricRankingResult
    | SectorStatsResult
    | PeerComparisonResult
    | ReportResult
    | RecommendationsResult,
    Field(discriminator="tool"),
]
