"""
Sector-relative ESG benchmarks.

Turns raw per-company metrics into peer-relative statistics: derived
ratios, sector distributions, percentile ranks, 0-100 normalized scores,
pillar scores, gap-to-leader analysis, radar series and the
strength/weakness/opportunity split.

All functions are pure. Missing or non-numeric data degrades to None
instead of raising.
"""
import math

from esg_agent.analysis.metrics_catalog import METRICS, PILLARS, RADAR_METRICS
from esg_agent.schemas.benchmark import (
    Classification,
    ClassifiedMetric,
    GapEntry,
    PillarScores,
    RadarPoint,
    SectorStatistic,
)


def is_number(value) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (math.isnan(value) or math.isinf(value))


def round_half_up(value: float) -> int:
    """Round .5 away from the floor, the way score rounding has always worked here."""
    return int(math.floor(value + 0.5))


def compute_derived_metrics(company: dict) -> dict:
    """Copy of the company record with the ratio metrics filled in.

    A ratio is only set when the numerator is present and the denominator
    is present and positive.
    """
    derived = dict(company)

    renewable = company.get("renewable_energy")
    energy = company.get("energy_consumption")
    if is_number(renewable) and is_number(energy) and energy > 0:
        derived["renewable_energy_pct"] = renewable / energy * 100

    female = company.get("female_employees")
    employees = company.get("employees")
    if is_number(female) and is_number(employees) and employees > 0:
        derived["gender_diversity_pct"] = female / employees * 100

    pay_female = company.get("median_remuneration_female")
    pay_male = company.get("median_remuneration_male")
    if is_number(pay_female) and is_number(pay_male) and pay_male > 0:
        derived["pay_equity_ratio"] = pay_female / pay_male

    return derived


def compute_sector_stats(companies: list[dict]) -> tuple[list[dict], dict[str, SectorStatistic]]:
    """Enrich every peer and compute the per-metric sector distribution.

    Quartiles use the lower-index convention sorted[floor(n * q)], so
    min <= p25 <= p50 <= p75 <= max always holds.
    """
    enriched = [compute_derived_metrics(c) for c in companies]
    stats: dict[str, SectorStatistic] = {}

    for metric, config in METRICS.items():
        values = sorted(c.get(metric) for c in enriched if is_number(c.get(metric)))
        n = len(values)
        if n == 0:
            stats[metric] = SectorStatistic()
            continue
        stats[metric] = SectorStatistic(
            min=values[0],
            max=values[-1],
            avg=sum(values) / n,
            p25=values[math.floor(n * 0.25)],
            p50=values[math.floor(n * 0.5)],
            p75=values[math.floor(n * 0.75)],
            best=values[0] if config.lower_is_better else values[-1],
            worst=values[-1] if config.lower_is_better else values[0],
            count=n,
        )

    return enriched, stats


def percentile_rank(value, population: list, lower_is_better: bool) -> int | None:
    """
    Share (0-100) of the peer population that the value outperforms.

    Peers are counted only when the value is strictly better than them.
    When the value itself appears in the population, its own entry counts
    as outperformed, so a company that strictly beats every other peer
    ranks 100 and a tie at the top does not.
    """
    if not is_number(value):
        return None
    valid = [v for v in population if is_number(v)]
    if not valid:
        return None

    if lower_is_better:
        outperformed = sum(1 for v in valid if v > value)
    else:
        outperformed = sum(1 for v in valid if v < value)
    if any(v == value for v in valid):
        outperformed += 1

    return round_half_up(outperformed / len(valid) * 100)


def normalized_score(value, min_value, max_value, lower_is_better: bool) -> int | None:
    """Linear 0-100 rescaling of value within [min, max], clamped. None on a degenerate range."""
    if not (is_number(value) and is_number(min_value) and is_number(max_value)):
        return None
    if max_value == min_value:
        return None

    span = max_value - min_value
    if lower_is_better:
        raw = (max_value - value) / span
    else:
        raw = (value - min_value) / span
    return round_half_up(max(0.0, min(1.0, raw)) * 100)


def compute_percentiles(company_metrics: dict, enriched_peers: list[dict]) -> dict[str, int | None]:
    return {
        metric: percentile_rank(
            company_metrics.get(metric),
            [p.get(metric) for p in enriched_peers],
            config.lower_is_better,
        )
        for metric, config in METRICS.items()
    }


def compute_normalized_scores(company_metrics: dict, stats: dict[str, SectorStatistic]) -> dict[str, int | None]:
    scores = {}
    for metric, config in METRICS.items():
        ms = stats.get(metric)
        if ms is None:
            continue
        scores[metric] = normalized_score(company_metrics.get(metric), ms.min, ms.max, config.lower_is_better)
    return scores


def _mean(values: list[int]) -> int | None:
    if not values:
        return None
    return round_half_up(sum(values) / len(values))


def compute_pillar_scores(company_metrics: dict, stats: dict[str, SectorStatistic]) -> PillarScores:
    """Average normalized score per pillar; overall only when all three pillars scored."""
    buckets: dict[str, list[int]] = {pillar: [] for pillar in PILLARS}
    for metric, config in METRICS.items():
        ms = stats.get(metric)
        if ms is None or ms.min is None:
            continue
        score = normalized_score(company_metrics.get(metric), ms.min, ms.max, config.lower_is_better)
        if score is not None:
            buckets[config.pillar].append(score)

    env = _mean(buckets["environmental"])
    soc = _mean(buckets["social"])
    gov = _mean(buckets["governance"])
    overall = None
    if env is not None and soc is not None and gov is not None:
        overall = round_half_up((env + soc + gov) / 3)

    return PillarScores(environmental=env, social=soc, governance=gov, overall=overall)


def compute_gap_analysis(
    company_metrics: dict,
    enriched_peers: list[dict],
    stats: dict[str, SectorStatistic],
) -> dict[str, GapEntry | None]:
    """
    Distance from the sector leader and the sector average for each metric.

    Gaps are positive when the company trails: for lower-is-better metrics
    gap = value - best, otherwise gap = best - value.
    """
    gaps: dict[str, GapEntry | None] = {}
    for metric, config in METRICS.items():
        value = company_metrics.get(metric)
        ms = stats.get(metric)
        if not is_number(value) or ms is None or ms.best is None:
            gaps[metric] = None
            continue

        leader = next((p for p in enriched_peers if p.get(metric) == ms.best), None)
        leader_name = (leader or {}).get("company_name") or "Leader"

        if config.lower_is_better:
            gap_to_leader = value - ms.best
            gap_to_avg = value - ms.avg if ms.avg is not None else None
        else:
            gap_to_leader = ms.best - value
            gap_to_avg = ms.avg - value if ms.avg is not None else None

        gaps[metric] = GapEntry(
            company_value=value,
            leader_value=ms.best,
            avg_value=ms.avg,
            gap_to_leader=gap_to_leader,
            gap_to_avg=gap_to_avg,
            leader_name=leader_name,
            unit=config.unit,
            label=config.label,
            lower_is_better=config.lower_is_better,
        )
    return gaps


def compute_radar_series(
    company_metrics: dict,
    enriched_peers: list[dict],
    stats: dict[str, SectorStatistic],
) -> list[RadarPoint]:
    """Company vs sector average vs an idealized leader at 100, on normalized scores."""
    points = []
    for metric in RADAR_METRICS:
        config = METRICS[metric]
        ms = stats.get(metric)
        if ms is None or ms.min is None:
            continue
        peer_values = [p.get(metric) for p in enriched_peers if is_number(p.get(metric))]
        avg_value = sum(peer_values) / len(peer_values) if peer_values else None

        company_score = normalized_score(company_metrics.get(metric), ms.min, ms.max, config.lower_is_better)
        avg_score = normalized_score(avg_value, ms.min, ms.max, config.lower_is_better)
        points.append(RadarPoint(
            metric=config.label,
            company=company_score if company_score is not None else 0,
            sector_avg=avg_score if avg_score is not None else 0,
            leader=100,
        ))
    return points


def classify(percentiles: dict[str, int | None]) -> Classification:
    """
    Split metrics by percentile.

    strength: >= 75, weakness: <= 25, opportunity: (25, 50].
    (50, 75) lands in no bucket. Strengths sort best first, the other
    two buckets worst first.
    """
    strengths, weaknesses, opportunities = [], [], []
    for metric, pct in percentiles.items():
        if pct is None:
            continue
        config = METRICS.get(metric)
        if config is None:
            continue
        entry = ClassifiedMetric(metric=metric, label=config.label, percentile=pct)
        if pct >= 75:
            strengths.append(entry)
        elif pct <= 25:
            weaknesses.append(entry)
        elif pct <= 50:
            opportunities.append(entry)

    return Classification(
        strengths=sorted(strengths, key=lambda e: e.percentile, reverse=True),
        weaknesses=sorted(weaknesses, key=lambda e: e.percentile),
        opportunities=sorted(opportunities, key=lambda e: e.percentile),
    )
