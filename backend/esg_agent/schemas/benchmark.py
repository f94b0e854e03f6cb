from pydantic import BaseModel, Field


class SectorStatistic(BaseModel):
    min: float | None = None
    max: float | None = None
    avg: float | None = None
    p25: float | None = None
    p50: float | None = None
    p75: float | None = None
    best: float | None = None
    worst: float | None = None
    count: int = 0


class PillarScores(BaseModel):
    environmental: int | None = None
    social: int | None = None
    governance: int | None = None
    overall: int | None = None


class GapEntry(BaseModel):
    company_value: float
    leader_value: float
    avg_value: float | None = None
    gap_to_leader: float
    gap_to_avg: float | None = None
    leader_name: str = "Leader"
    unit: str
    label: str
    lower_is_better: bool


class RadarPoint(BaseModel):
    metric: str  # display label
    company: int = 0
    sector_avg: int = 0
    leader: int = 100


class ClassifiedMetric(BaseModel):
    metric: str
    label: str
    percentile: int


class Classification(BaseModel):
    strengths: list[ClassifiedMetric] = []
    weaknesses: list[ClassifiedMetric] = []
    opportunities: list[ClassifiedMetric] = []


class BoxPlotEntry(BaseModel):
    metric: str
    label: str
    unit: str
    pillar: str
    lower_is_better: bool
    company_value: float | None = None
    min: float | None = None
    max: float | None = None
    p25: float | None = None
    p50: float | None = None
    p75: float | None = None
    avg: float | None = None


class CompositionSlice(BaseModel):
    name: str
    value: float


class NetZeroEntry(BaseModel):
    id: str | None = None
    company_name: str | None = None
    value: float


class CompanyBenchmark(BaseModel):
    company: dict
    pillar_scores: PillarScores
    percentiles: dict[str, int | None]
    normalized_scores: dict[str, int | None]
    gap_analysis: dict[str, GapEntry | None]
    radar_data: list[RadarPoint]
    strengths: list[ClassifiedMetric] = []
    weaknesses: list[ClassifiedMetric] = []
    opportunities: list[ClassifiedMetric] = []
    sector_stats: dict[str, SectorStatistic]
    boxplot_data: list[BoxPlotEntry] = []
    gender_composition: list[CompositionSlice] | None = None
    board_composition: list[CompositionSlice] | None = None
    board_independence_composition: list[CompositionSlice] | None = None
    net_zero_ranked: list[NetZeroEntry] = []
    heatmap_data: list[dict] = []
    heatmap_metrics: list[str] = []
    peer_count: int = 0


class RankedCompany(BaseModel):
    id: str | None = None
    company_name: str | None = None
    value: float
    normalized_score: int | None = None
    percentile: int | None = None


class PeerRating(BaseModel):
    id: str
    company_name: str
    sector: str | None = None
    esg_score: float | None = None
    environment_score: float | None = None
    social_score: float | None = None
    governance_score: float | None = None
    latest_report_date: str | None = None
    coverage: str | None = None
    company_id: str | None = None  # internal company matched by name


class PeerComparison(BaseModel):
    companies: list[PeerRating] = []
    total: int = 0


class SimulationRequest(BaseModel):
    company_id: str
    overrides: dict[str, int] = Field(default_factory=dict)  # metric -> simulated percentile
    peer_ids: list[str] | None = None


class TrajectoryPoint(BaseModel):
    year: int
    score: int


class SimulationResult(BaseModel):
    company_id: str
    current: PillarScores
    baseline: PillarScores
    projected: PillarScores
    trajectory: list[TrajectoryPoint]
