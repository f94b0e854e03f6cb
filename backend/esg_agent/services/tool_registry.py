"""
Tools the chat model may call.

Every tool is (name, argument schema, executor). Executors read peer
records, run the benchmarking engine and return a typed result with a
one-line `summary`. The chart-selection tool is declared here so the model
can see it, but the orchestrator handles it itself.
"""
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import BaseModel

from esg_agent.analysis.metrics_catalog import get_metric
from esg_agent.schemas.company import CompanySummary
from esg_agent.schemas.tools import (
    BenchmarkResult,
    ChartSelectionArgs,
    CompaniesResult,
    CompanyArgs,
    MetricRankingArgs,
    MetricRankingResult,
    NoArgs,
    PeerComparisonArgs,
    PeerComparisonResult,
    RecommendationsResult,
    ReportResult,
    SectorStatsArgs,
    SectorStatsResult,
    ToolResult,
)
from esg_agent.services.benchmark_service import BenchmarkService
from esg_agent.services.conversation import RequestContext
from esg_agent.services.prompts import CHART_SELECTION_DESCRIPTION
from esg_agent.services.recommendation_service import RecommendationService

logger = logging.getLogger(__name__)

CHART_SELECTION_TOOL = "suggest_charts"

Executor = Callable[[BaseModel, RequestContext], Awaitable[ToolResult]]


class UnknownToolError(LookupError):
    def __init__(self, name: str):
        super().__init__(f"Unknown function: {name}")
        self.name = name


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    args_model: type[BaseModel]
    executor: Executor | None = None

    def declaration(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(),
            },
        }


def _company_id(args: CompanyArgs, ctx: RequestContext) -> str:
    company_id = args.company_id or ctx.company_id
    if not company_id:
        raise ValueError("company_id is required when no company is selected")
    return company_id


class ToolRegistry:
    def __init__(self, benchmarks: BenchmarkService, recommendations: RecommendationService):
        self.benchmarks = benchmarks
        self.recommendations = recommendations
        self.tools: dict[str, Tool] = {
            tool.name: tool
            for tool in (
                Tool(
                    "get_companies",
                    "List all companies in the ESG database with their names, BSE codes, and sectors.",
                    NoArgs,
                    self._get_companies,
                ),
                Tool(
                    "get_company_benchmark",
                    "Fetch full ESG benchmark analysis for a company: pillar scores (E/S/G), percentile "
                    "rankings, gap analysis, strengths, weaknesses, and radar chart data.",
                    CompanyArgs,
                    self._get_company_benchmark,
                ),
                Tool(
                    "get_metric_ranking",
                    "Get sector-wide ranking for a specific ESG metric, all companies sorted by performance.",
                    MetricRankingArgs,
                    self._get_metric_ranking,
                ),
                Tool(
                    "get_sector_stats",
                    "Get aggregate sector statistics (min, max, average, percentiles) for all ESG metrics.",
                    SectorStatsArgs,
                    self._get_sector_stats,
                ),
                Tool(
                    "get_peer_comparison",
                    "Fetch external ESG ratings (Overall, Environmental, Social, Governance) for all peers. "
                    "Use this for peer comparison, competitive benchmarking, scatter plots, ranking tables, "
                    "or questions about how a company stacks up against all competitors.",
                    PeerComparisonArgs,
                    self._get_peer_comparison,
                ),
                Tool(
                    "generate_report",
                    "Generate a complete ESG analysis report with ALL charts and ALL sections. Call this when "
                    "the user asks for a full report, complete analysis, PDF, or comprehensive overview.",
                    NoArgs,
                    self._generate_report,
                ),
                Tool(
                    "get_recommendations",
                    "Generate 5 prioritized recommendations for improving ESG scores with impact estimates "
                    "and effort levels. Use when the user asks for recommendations, an improvement plan, "
                    "action items, or what to focus on.",
                    CompanyArgs,
                    self._get_recommendations,
                ),
                Tool(CHART_SELECTION_TOOL, CHART_SELECTION_DESCRIPTION, ChartSelectionArgs),
            )
        }

    def declarations(self) -> list[dict]:
        return [tool.declaration() for tool in self.tools.values()]

    async def execute(self, name: str, arguments: dict, ctx: RequestContext) -> ToolResult:
        """Validate arguments and run one tool. Any failure propagates to the caller."""
        tool = self.tools.get(name)
        if tool is None or tool.executor is None:
            raise UnknownToolError(name)
        args = tool.args_model.model_validate(arguments or {})
        return await tool.executor(args, ctx)

    # --- Executors ---

    async def _get_companies(self, args: NoArgs, ctx: RequestContext) -> CompaniesResult:
        companies = await ctx.guard(self.benchmarks.repository.list_companies())
        summaries = [
            CompanySummary(id=c.id, name=c.company_name, bse_code=c.bse_code, sector=c.sector)
            for c in companies
        ]
        return CompaniesResult(
            companies=summaries,
            count=len(summaries),
            summary=f"Found {len(summaries)} companies",
        )

    async def _get_company_benchmark(self, args: CompanyArgs, ctx: RequestContext) -> BenchmarkResult:
        benchmark = await ctx.guard(
            self.benchmarks.get_company_benchmark(_company_id(args, ctx), ctx.peer_ids)
        )
        scores = benchmark.pillar_scores
        return BenchmarkResult(
            benchmark=benchmark,
            summary=(
                f"Benchmark for {benchmark.company.get('company_name')}: Overall {scores.overall}/100 "
                f"(E:{scores.environmental} S:{scores.social} G:{scores.governance}). "
                f"{len(benchmark.strengths)} strengths, {len(benchmark.weaknesses)} weaknesses."
            ),
        )

    async def _get_metric_ranking(self, args: MetricRankingArgs, ctx: RequestContext) -> MetricRankingResult:
        config = get_metric(args.metric)
        ranked, stats = await ctx.guard(self.benchmarks.get_metric_ranking(args.metric, args.sector))
        if ranked:
            leader = f"{ranked[0].company_name} ({ranked[0].value:.2f} {config.unit})"
        else:
            leader = "none"
        return MetricRankingResult(
            metric=args.metric,
            label=config.label,
            unit=config.unit,
            lower_is_better=config.lower_is_better,
            ranked=ranked,
            stats=stats,
            summary=f"Rankings for {config.label}: {len(ranked)} companies. Leader: {leader}",
        )

    async def _get_sector_stats(self, args: SectorStatsArgs, ctx: RequestContext) -> SectorStatsResult:
        stats = await ctx.guard(self.benchmarks.get_sector_stats(args.sector))
        return SectorStatsResult(stats=stats, summary=f"Sector stats loaded for {len(stats)} metrics.")

    async def _get_peer_comparison(self, args: PeerComparisonArgs, ctx: RequestContext) -> PeerComparisonResult:
        comparison = await ctx.guard(self.benchmarks.get_peer_comparison())
        summary = f"Peer comparison loaded: {comparison.total} companies."
        if args.selected_company_name:
            summary += f" Highlighted: {args.selected_company_name}."
        return PeerComparisonResult(
            companies=comparison.companies,
            selected_name=args.selected_company_name,
            summary=summary,
        )

    async def _generate_report(self, args: NoArgs, ctx: RequestContext) -> ReportResult:
        return ReportResult(success=True, summary="Full ESG report triggered")

    async def _get_recommendations(self, args: CompanyArgs, ctx: RequestContext) -> RecommendationsResult:
        company_id = _company_id(args, ctx)
        benchmark = await ctx.guard(self.benchmarks.get_company_benchmark(company_id, ctx.peer_ids))
        enriched = await ctx.guard(self.benchmarks.get_enriched_peers(company_id, ctx.peer_ids))
        recommendations = await self.recommendations.generate(benchmark, enriched, ctx)

        company_name = benchmark.company.get("company_name")
        top = recommendations[0].title if recommendations else "none"
        return RecommendationsResult(
            recommendations=recommendations,
            company_name=company_name,
            current_scores=benchmark.pillar_scores,
            percentiles=benchmark.percentiles,
            sector_stats=benchmark.sector_stats,
            summary=f"Generated {len(recommendations)} recommendations for {company_name}. Top priority: {top}",
        )
