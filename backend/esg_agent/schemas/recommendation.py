from typing import Literal

from pydantic import BaseModel, Field


class RecommendationTag(BaseModel):
    label: str
    color: Literal["green", "blue", "purple", "yellow", "orange"]


class AffectedMetric(BaseModel):
    metric_key: str
    current_percentile: int | None = None
    target_percentile: int


class Recommendation(BaseModel):
    id: int
    title: str
    description: str
    tags: list[RecommendationTag] = []
    esg_impact_pts: int = Field(ge=1, le=15)
    effort_level: Literal["LOW", "MED", "HIGH"]
    affected_metrics: list[AffectedMetric] = Field(min_length=1)
    pillar: Literal["environmental", "social", "governance"]


class MetricContext(BaseModel):
    """Per-metric peer context handed to the recommendation prompt and fallback."""
    label: str
    pillar: str
    unit: str
    lower_is_better: bool
    company_value: float
    sector_avg: float | None = None
    leader_value: float
    leader_name: str
    percentile: int | None = None
    rank: int
    total_peers: int
    top3_leaders: list[str] = []
    sector_p25: float | None = None
    sector_p50: float | None = None
    sector_p75: float | None = None
