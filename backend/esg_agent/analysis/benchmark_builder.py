"""
Benchmark builder - assembles the full peer-relative benchmark for one
company, plus sector-wide metric rankings.

sector stats are computed once per peer set and reused for every derived
view (percentiles, scores, gaps, radar, box plots, compositions, heatmap).
"""
from esg_agent.analysis.metrics_catalog import HEATMAP_METRICS, METRICS, get_metric
from esg_agent.analysis.sector_benchmarks import (
    classify,
    compute_derived_metrics,
    compute_gap_analysis,
    compute_normalized_scores,
    compute_percentiles,
    compute_pillar_scores,
    compute_radar_series,
    compute_sector_stats,
    is_number,
    normalized_score,
    percentile_rank,
)
from esg_agent.schemas.benchmark import (
    BoxPlotEntry,
    CompanyBenchmark,
    CompositionSlice,
    NetZeroEntry,
    RankedCompany,
    SectorStatistic,
)

# Net-zero targets at or before this year are treated as placeholders
NET_ZERO_MIN_YEAR = 2020


def _share_split(pct, first: str, second: str) -> list[CompositionSlice] | None:
    if not is_number(pct):
        return None
    return [
        CompositionSlice(name=first, value=round(pct, 1)),
        CompositionSlice(name=second, value=round(100 - pct, 1)),
    ]


def _gender_composition(company: dict) -> list[CompositionSlice] | None:
    female = company.get("female_employees") if is_number(company.get("female_employees")) else 0
    total = company.get("employees") if is_number(company.get("employees")) else 0
    if total <= 0:
        return None
    return [
        CompositionSlice(name="Female", value=female),
        CompositionSlice(name="Male", value=max(total - female, 0)),
    ]


def _boxplot_data(company: dict, stats: dict[str, SectorStatistic]) -> list[BoxPlotEntry]:
    entries = []
    for metric, config in METRICS.items():
        ms = stats.get(metric) or SectorStatistic()
        value = company.get(metric)
        entries.append(BoxPlotEntry(
            metric=metric,
            label=config.label,
            unit=config.unit,
            pillar=config.pillar,
            lower_is_better=config.lower_is_better,
            company_value=value if is_number(value) else None,
            min=ms.min,
            max=ms.max,
            p25=ms.p25,
            p50=ms.p50,
            p75=ms.p75,
            avg=ms.avg,
        ))
    return entries


def _heatmap_data(enriched: list[dict], stats: dict[str, SectorStatistic]) -> list[dict]:
    rows = []
    for peer in enriched:
        row = {"company_name": peer.get("company_name"), "id": peer.get("id")}
        for metric in HEATMAP_METRICS:
            ms = stats[metric]
            row[metric] = normalized_score(peer.get(metric), ms.min, ms.max, METRICS[metric].lower_is_better)
        rows.append(row)
    return rows


def _net_zero_ranked(enriched: list[dict]) -> list[NetZeroEntry]:
    entries = [
        NetZeroEntry(id=p.get("id"), company_name=p.get("company_name"), value=p["net_zero_target_year"])
        for p in enriched
        if is_number(p.get("net_zero_target_year")) and p["net_zero_target_year"] > NET_ZERO_MIN_YEAR
    ]
    return sorted(entries, key=lambda e: e.value)


def build_benchmark(company: dict, peers: list[dict]) -> CompanyBenchmark:
    """Full benchmark for `company` against `peers` (the peer set includes the company)."""
    enriched, stats = compute_sector_stats(peers)
    target = compute_derived_metrics(company)

    percentiles = compute_percentiles(target, enriched)
    buckets = classify(percentiles)

    return CompanyBenchmark(
        company=target,
        pillar_scores=compute_pillar_scores(target, stats),
        percentiles=percentiles,
        normalized_scores=compute_normalized_scores(target, stats),
        gap_analysis=compute_gap_analysis(target, enriched, stats),
        radar_data=compute_radar_series(target, enriched, stats),
        strengths=buckets.strengths,
        weaknesses=buckets.weaknesses,
        opportunities=buckets.opportunities,
        sector_stats=stats,
        boxplot_data=_boxplot_data(target, stats),
        gender_composition=_gender_composition(target),
        board_composition=_share_split(target.get("board_women_percent"), "Women", "Men"),
        board_independence_composition=_share_split(
            target.get("independent_directors_percent"), "Independent", "Non-Independent"
        ),
        net_zero_ranked=_net_zero_ranked(enriched),
        heatmap_data=_heatmap_data(enriched, stats),
        heatmap_metrics=list(HEATMAP_METRICS),
        peer_count=len(enriched),
    )


def rank_metric(metric: str, peers: list[dict]) -> tuple[list[RankedCompany], SectorStatistic]:
    """Every peer with a value for `metric`, best normalized score first."""
    config = get_metric(metric)
    enriched, stats = compute_sector_stats(peers)
    ms = stats[metric]
    population = [p.get(metric) for p in enriched]

    ranked = [
        RankedCompany(
            id=p.get("id"),
            company_name=p.get("company_name"),
            value=p[metric],
            normalized_score=normalized_score(p[metric], ms.min, ms.max, config.lower_is_better),
            percentile=percentile_rank(p[metric], population, config.lower_is_better),
        )
        for p in enriched
        if is_number(p.get(metric))
    ]
    ranked.sort(key=lambda r: r.normalized_score if r.normalized_score is not None else 0, reverse=True)
    return ranked, ms


def peer_order(metric: str, enriched_peers: list[dict]) -> list[dict]:
    """Peers with a value for `metric`, best performer first."""
    config = get_metric(metric)
    with_value = [p for p in enriched_peers if is_number(p.get(metric))]
    return sorted(with_value, key=lambda p: p[metric], reverse=not config.lower_is_better)
