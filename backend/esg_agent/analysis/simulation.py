"""
What-if score simulation.

Projected scores are averaged from percentiles rather than normalized
scores, so they are only comparable with each other: the trajectory
applies the baseline->projected delta on top of the real overall score.
"""
from esg_agent.analysis.metrics_catalog import METRICS, PILLARS
from esg_agent.analysis.sector_benchmarks import round_half_up
from esg_agent.schemas.benchmark import PillarScores, TrajectoryPoint


def simulate_scores(percentiles: dict[str, int | None], overrides: dict[str, int] | None = None) -> PillarScores:
    merged = {**percentiles, **(overrides or {})}

    buckets: dict[str, list[int]] = {pillar: [] for pillar in PILLARS}
    for metric, config in METRICS.items():
        value = merged.get(metric)
        if value is None:
            continue
        buckets[config.pillar].append(value)

    pillar = {
        name: round_half_up(sum(values) / len(values)) if values else None
        for name, values in buckets.items()
    }
    scored = [v for v in pillar.values() if v is not None]
    overall = round_half_up(sum(scored) / len(scored)) if scored else None

    return PillarScores(**pillar, overall=overall)


def score_trajectory(
    current_overall: int | None,
    baseline_overall: int | None,
    projected_overall: int | None,
    start_year: int,
) -> list[TrajectoryPoint]:
    anchor = current_overall or 0
    delta = (projected_overall or 0) - (baseline_overall or 0)
    return [
        TrajectoryPoint(year=start_year, score=anchor),
        TrajectoryPoint(year=start_year + 1, score=round_half_up(anchor + delta * 0.4)),
        TrajectoryPoint(year=start_year + 2, score=min(100, anchor + delta)),
    ]
