"""
Chart catalog - maps tool results to keyed chart specifications.

Writes are unconditional upserts keyed by chart key; a key is only written
when its source data is present. The catalog lives on the request context
and is read once, when the chat stream closes.
"""
from esg_agent.schemas.benchmark import CompanyBenchmark
from esg_agent.schemas.chat import ChartSpec
from esg_agent.schemas.tools import (
    BenchmarkResult,
    MetricRankingResult,
    PeerComparisonResult,
    RecommendationsResult,
    ReportResult,
    ToolResult,
)

# Shown when the model fetched data but never picked charts
DEFAULT_CHART_KEYS = ("pillars", "radar", "waterfall", "percentilebar")

BOXPLOT_GROUPS = (
    ("boxplots_env", "environmental", "Environmental - Distribution vs Peers"),
    ("boxplots_soc", "social", "Social - Distribution vs Peers"),
    ("boxplots_gov", "governance", "Governance - Distribution vs Peers"),
)


def _benchmark_charts(benchmark: CompanyBenchmark, catalog: dict[str, ChartSpec]) -> None:
    name = benchmark.company.get("company_name")
    company_id = benchmark.company.get("id")

    catalog["pillars"] = ChartSpec(
        type="pillars", data=benchmark.pillar_scores.model_dump(), title=f"ESG Pillar Scores - {name}"
    )
    if benchmark.radar_data:
        catalog["radar"] = ChartSpec(
            type="radar",
            data=[p.model_dump() for p in benchmark.radar_data],
            title=f"ESG Profile vs Sector - {name}",
        )
    if benchmark.normalized_scores:
        catalog["treemap"] = ChartSpec(
            type="treemap", data=dict(benchmark.normalized_scores), title="Metric Score Overview (Treemap)"
        )
    if benchmark.percentiles:
        catalog["waterfall"] = ChartSpec(
            type="waterfall", data=dict(benchmark.percentiles), title="Percentile Gap vs Sector Average"
        )

    for key, pillar, title in BOXPLOT_GROUPS:
        entries = [
            e.model_dump() for e in benchmark.boxplot_data
            if e.pillar == pillar and e.company_value is not None
        ]
        if entries:
            catalog[key] = ChartSpec(type="boxplots", data=entries, title=title)

    donuts = (
        ("donut_gender", benchmark.gender_composition, ["#bc8cff", "#58a6ff"], "Gender Composition"),
        ("donut_board", benchmark.board_composition, ["#3fb950", "#484f58"], "Board Gender Composition"),
        ("donut_indir", benchmark.board_independence_composition, ["#58a6ff", "#484f58"], "Board Independence"),
    )
    for key, slices, colors, title in donuts:
        if slices:
            catalog[key] = ChartSpec(type="donut", data=[s.model_dump() for s in slices], colors=colors, title=title)

    if benchmark.net_zero_ranked:
        catalog["netzero"] = ChartSpec(
            type="netzero",
            data=[e.model_dump() for e in benchmark.net_zero_ranked],
            selected_id=company_id,
            title="Net Zero Target Year - All Peers",
        )
    if benchmark.heatmap_data:
        catalog["heatmap"] = ChartSpec(
            type="heatmap",
            data=[dict(row) for row in benchmark.heatmap_data],
            metrics=list(benchmark.heatmap_metrics),
            selected_id=company_id,
            title="Peer Comparison Heatmap",
        )


def _peer_comparison_charts(result: PeerComparisonResult, catalog: dict[str, ChartSpec]) -> None:
    companies = [c.model_dump() for c in result.companies]
    for key, title in (
        ("peer_bars", "Peer Score Distribution"),
        ("gap_leader", "Gap to Sector Leader"),
        ("env_scatter", "Environmental vs Social Positioning"),
        ("pillar_stacked", "Pillar Breakdown - Top 8 Companies"),
    ):
        catalog[key] = ChartSpec(type=key, data=companies, selected_name=result.selected_name, title=title)


def _metric_ranking_charts(result: MetricRankingResult, catalog: dict[str, ChartSpec]) -> None:
    catalog["percentilebar"] = ChartSpec(
        type="percentilebar",
        data=[r.model_dump() for r in result.ranked],
        label=result.label,
        unit=result.unit,
        title=f"{result.label} - Percentile Rankings",
    )
    if result.metric == "net_zero_target_year":
        catalog["netzero"] = ChartSpec(
            type="netzero",
            data=[{"id": r.id, "company_name": r.company_name, "value": r.value} for r in result.ranked],
            selected_id=None,
            title="Net Zero Target Year Timeline",
        )


def build_chart_catalog(result: ToolResult, catalog: dict[str, ChartSpec]) -> None:
    """Upsert the charts `result` can feed into `catalog`."""
    if isinstance(result, BenchmarkResult):
        _benchmark_charts(result.benchmark, catalog)
    elif isinstance(result, PeerComparisonResult):
        _peer_comparison_charts(result, catalog)
    elif isinstance(result, MetricRankingResult):
        _metric_ranking_charts(result, catalog)
    elif isinstance(result, RecommendationsResult):
        catalog["recommendations"] = ChartSpec(
            type="recommendations",
            data=[r.model_dump() for r in result.recommendations],
            current_scores=result.current_scores.model_dump(),
            percentiles=dict(result.percentiles),
            sector_stats={k: v.model_dump() for k, v in result.sector_stats.items()},
            company_name=result.company_name,
            title=f"Recommendations - {result.company_name}",
        )
    elif isinstance(result, ReportResult):
        catalog["report"] = ChartSpec(type="report", title="Full ESG Analysis Report")


def resolve_charts(catalog: dict[str, ChartSpec], selected_keys: list[str] | None) -> list[ChartSpec]:
    """
    Final chart list for the stream.

    A model selection wins whenever one was made; selected keys missing
    from the catalog are dropped. Without a selection, the default keys
    present in the catalog are used.
    """
    if selected_keys is not None:
        return [catalog[key] for key in selected_keys if key in catalog]
    return [catalog[key] for key in DEFAULT_CHART_KEYS if key in catalog]
