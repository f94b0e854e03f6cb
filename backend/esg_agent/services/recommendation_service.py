"""
Improvement recommendations.

The model is asked for exactly five recommendations. When the call fails,
returns unparseable JSON, or breaks the contract (wrong count, excluded
metric, missing fields), a deterministic list is built from the
weakness and opportunity buckets instead, with the same fields, topped up
with disclosure items when the company reports too few metrics.
"""
import json
import logging

from pydantic import ValidationError

from esg_agent.analysis.benchmark_builder import peer_order
from esg_agent.analysis.metrics_catalog import METRICS
from esg_agent.schemas.benchmark import ClassifiedMetric, CompanyBenchmark
from esg_agent.schemas.recommendation import (
    AffectedMetric,
    MetricContext,
    Recommendation,
    RecommendationTag,
)
from esg_agent.services.conversation import RequestAborted, RequestContext
from esg_agent.services.prompts import RECOMMENDATION_PROMPT, RECOMMENDATION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

RECOMMENDATION_COUNT = 5
EXCLUDED_METRICS = ("data_breaches",)

PILLAR_LABELS = {"environmental": "Environmental", "social": "Social", "governance": "Governance"}
PILLAR_COLORS = {"environmental": "green", "social": "blue", "governance": "purple"}


def _fmt(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else "n/a"


def build_metric_context(benchmark: CompanyBenchmark, enriched_peers: list[dict]) -> dict[str, MetricContext]:
    """Peer ranking context for every metric the company reports, minus excluded ones."""
    company_id = benchmark.company.get("id")
    details = {}
    for metric, config in METRICS.items():
        if metric in EXCLUDED_METRICS:
            continue
        gap = benchmark.gap_analysis.get(metric)
        if gap is None:
            continue

        ordered = peer_order(metric, enriched_peers)
        rank = next((i + 1 for i, p in enumerate(ordered) if p.get("id") == company_id), 0)
        suffix = "%" if config.unit == "%" else ""
        top3 = [f"{p.get('company_name')} ({p[metric]:.1f}{suffix})" for p in ordered[:3]]
        ms = benchmark.sector_stats.get(metric)

        details[metric] = MetricContext(
            label=config.label,
            pillar=config.pillar,
            unit=config.unit,
            lower_is_better=config.lower_is_better,
            company_value=gap.company_value,
            sector_avg=gap.avg_value,
            leader_value=gap.leader_value,
            leader_name=gap.leader_name,
            percentile=benchmark.percentiles.get(metric),
            rank=rank,
            total_peers=len(ordered),
            top3_leaders=top3,
            sector_p25=ms.p25 if ms else None,
            sector_p50=ms.p50 if ms else None,
            sector_p75=ms.p75 if ms else None,
        )
    return details


def _fallback_candidates(benchmark: CompanyBenchmark) -> list[ClassifiedMetric]:
    """Weaknesses, then opportunities, then any other scored metric, worst first."""
    picked = [
        item for item in [*benchmark.weaknesses, *benchmark.opportunities]
        if item.metric not in EXCLUDED_METRICS
    ]
    seen = {item.metric for item in picked}
    rest = sorted(
        (
            ClassifiedMetric(metric=metric, label=METRICS[metric].label, percentile=pct)
            for metric, pct in benchmark.percentiles.items()
            if pct is not None and metric in METRICS and metric not in seen and metric not in EXCLUDED_METRICS
        ),
        key=lambda item: item.percentile,
    )
    return (picked + rest)[:RECOMMENDATION_COUNT]


def _undisclosed_metrics(benchmark: CompanyBenchmark) -> list[str]:
    """Eligible metrics the company has no value for, in catalog order."""
    return [
        metric for metric in METRICS
        if metric not in EXCLUDED_METRICS and benchmark.percentiles.get(metric) is None
    ]


def _target_percentile(current: int) -> int:
    if current < 75:
        return min(75, current + 25)
    return min(100, current + 10)


def fallback_recommendations(
    benchmark: CompanyBenchmark, metric_details: dict[str, MetricContext]
) -> list[Recommendation]:
    recommendations = []
    for idx, item in enumerate(_fallback_candidates(benchmark)):
        config = METRICS[item.metric]
        md = metric_details.get(item.metric)
        pillar_label = PILLAR_LABELS[config.pillar]

        title = f"Improve {item.label}"
        if md is not None and md.sector_p50 is not None:
            title += f": {md.company_value:.1f} → {md.sector_p50:.1f} {md.unit}"

        if md is not None:
            description = (
                f"You rank #{md.rank} of {md.total_peers} peers. {md.leader_name} leads at "
                f"{_fmt(md.leader_value)} {md.unit}. Moving to the sector median ({_fmt(md.sector_p50)}) "
                f"would boost your {md.pillar} pillar score significantly."
            )
        else:
            description = (
                f"Currently at {item.percentile}th percentile. Improving to sector median would "
                f"boost your {pillar_label.lower()} score."
            )

        if item.percentile <= 25:
            effort = "HIGH"
        elif item.percentile <= 50:
            effort = "MED"
        else:
            effort = "LOW"

        recommendations.append(Recommendation(
            id=idx + 1,
            title=title,
            description=description,
            tags=[RecommendationTag(label=pillar_label, color=PILLAR_COLORS[config.pillar])],
            esg_impact_pts=max(1, min(15, round((50 - item.percentile) / 5))),
            effort_level=effort,
            affected_metrics=[AffectedMetric(
                metric_key=item.metric,
                current_percentile=item.percentile,
                target_percentile=_target_percentile(item.percentile),
            )],
            pillar=config.pillar,
        ))

    # Thin disclosures leave slots open; fill them with reporting gaps
    for metric in _undisclosed_metrics(benchmark)[:RECOMMENDATION_COUNT - len(recommendations)]:
        recommendations.append(_disclosure_recommendation(len(recommendations) + 1, metric, benchmark))
    return recommendations


def _disclosure_recommendation(rec_id: int, metric: str, benchmark: CompanyBenchmark) -> Recommendation:
    config = METRICS[metric]
    pillar_label = PILLAR_LABELS[config.pillar]
    stats = benchmark.sector_stats.get(metric)

    if stats is not None and stats.count:
        description = (
            f"{stats.count} of {benchmark.peer_count} peers report {config.label} "
            f"(sector median {_fmt(stats.p50)} {config.unit}). Disclosing it lets your "
            f"{pillar_label.lower()} score reflect actual performance."
        )
    else:
        description = (
            f"No peer reports {config.label} yet. Disclosing it early sets the "
            f"{pillar_label.lower()} benchmark for the sector."
        )

    return Recommendation(
        id=rec_id,
        title=f"Start disclosing {config.label}",
        description=description,
        tags=[RecommendationTag(label=pillar_label, color=PILLAR_COLORS[config.pillar])],
        esg_impact_pts=2,
        effort_level="MED",
        affected_metrics=[AffectedMetric(metric_key=metric, current_percentile=None, target_percentile=50)],
        pillar=config.pillar,
    )


def parse_recommendations(payload) -> list[Recommendation]:
    """Validate model output. Raises ValueError when it breaks the contract."""
    items = payload.get("recommendations") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise ValueError("Expected a list of recommendations")

    try:
        recommendations = [Recommendation.model_validate(item) for item in items]
    except ValidationError as e:
        raise ValueError(f"Malformed recommendation: {e}") from e

    if len(recommendations) != RECOMMENDATION_COUNT:
        raise ValueError(f"Expected {RECOMMENDATION_COUNT} recommendations, got {len(recommendations)}")
    for rec in recommendations:
        if any(m.metric_key in EXCLUDED_METRICS for m in rec.affected_metrics):
            raise ValueError(f"Recommendation {rec.id} references an excluded metric")
    return recommendations


class RecommendationService:
    def __init__(self, llm, sector_label: str):
        self.llm = llm
        self.sector_label = sector_label

    def _build_prompt(self, benchmark: CompanyBenchmark, metric_details: dict[str, MetricContext]) -> str:
        scores = benchmark.pillar_scores

        def bucket(items: list[ClassifiedMetric]) -> str:
            return json.dumps([i.model_dump() for i in items if i.metric not in EXCLUDED_METRICS])

        return RECOMMENDATION_PROMPT.format(
            company_name=benchmark.company.get("company_name"),
            sector=benchmark.company.get("sector") or self.sector_label,
            peer_count=benchmark.peer_count,
            environmental=scores.environmental,
            social=scores.social,
            governance=scores.governance,
            overall=scores.overall,
            metric_details=json.dumps({k: v.model_dump() for k, v in metric_details.items()}, indent=2),
            weaknesses=bucket(benchmark.weaknesses),
            opportunities=bucket(benchmark.opportunities),
            strengths=bucket(benchmark.strengths),
            excluded=", ".join(f'"{m}"' for m in EXCLUDED_METRICS),
        )

    async def generate(
        self,
        benchmark: CompanyBenchmark,
        enriched_peers: list[dict],
        ctx: RequestContext | None = None,
    ) -> list[Recommendation]:
        metric_details = build_metric_context(benchmark, enriched_peers)
        company_name = benchmark.company.get("company_name")

        if self.llm is None or not self.llm.is_configured:
            logger.info(f"Recommendation model not configured, using fallback for {company_name}")
            return fallback_recommendations(benchmark, metric_details)

        prompt = self._build_prompt(benchmark, metric_details)
        try:
            call = self.llm.complete_json(RECOMMENDATION_SYSTEM_PROMPT, prompt)
            payload = await ctx.guard(call) if ctx is not None else await call
            return parse_recommendations(payload)
        except RequestAborted:
            raise
        except Exception as e:
            logger.warning(f"Recommendation generation failed for {company_name}, using fallback: {e}")
            return fallback_recommendations(benchmark, metric_details)
