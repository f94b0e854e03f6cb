import logging
import re

from esg_agent.analysis.benchmark_builder import build_benchmark, rank_metric
from esg_agent.analysis.sector_benchmarks import compute_sector_stats
from esg_agent.models.company import EsgReport
from esg_agent.schemas.benchmark import (
    CompanyBenchmark,
    PeerComparison,
    PeerRating,
    RankedCompany,
    SectorStatistic,
)
from esg_agent.services.company_repository import CompanyRepository

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_score(raw: str | None) -> float | None:
    """Leading number of a scraped rating string. Blank, zero or unparseable -> None."""
    if raw is None:
        return None
    match = _LEADING_NUMBER.match(str(raw))
    if not match:
        return None
    value = float(match.group(1))
    return value or None


def _to_rating(report: EsgReport, company_ids: dict[str, str]) -> PeerRating:
    return PeerRating(
        id=report.id,
        company_name=report.company_name or "",
        sector=report.sector,
        esg_score=parse_score(report.esg_score),
        environment_score=parse_score(report.environment_score),
        social_score=parse_score(report.social_score),
        governance_score=parse_score(report.governance_score),
        latest_report_date=report.latest_report_date,
        coverage=report.coverage,
        company_id=company_ids.get(report.company_name),
    )


class BenchmarkService:
    """Joins repository reads with the pure benchmarking functions."""

    def __init__(self, repository: CompanyRepository):
        self.repository = repository

    async def get_company_benchmark(self, company_id: str, peer_ids: list[str] | None = None) -> CompanyBenchmark:
        company = await self.repository.get_company(company_id)
        peers = await self.repository.get_peer_set(company, peer_ids)
        return build_benchmark(company.to_record(), [p.to_record() for p in peers])

    async def get_enriched_peers(self, company_id: str, peer_ids: list[str] | None = None) -> list[dict]:
        company = await self.repository.get_company(company_id)
        peers = await self.repository.get_peer_set(company, peer_ids)
        enriched, _ = compute_sector_stats([p.to_record() for p in peers])
        return enriched

    async def get_metric_ranking(
        self, metric: str, sector: str | None = None
    ) -> tuple[list[RankedCompany], SectorStatistic]:
        companies = await self.repository.list_companies(sector=sector)
        return rank_metric(metric, [c.to_record() for c in companies])

    async def get_sector_stats(self, sector: str | None = None) -> dict[str, SectorStatistic]:
        companies = await self.repository.list_companies(sector=sector)
        _, stats = compute_sector_stats([c.to_record() for c in companies])
        return stats

    async def get_peer_comparison(self) -> PeerComparison:
        companies = await self.repository.list_companies()
        company_ids = {c.company_name: c.id for c in companies if c.company_name}
        reports = await self.repository.list_reports_for_names(list(company_ids))

        ratings = sorted(
            (_to_rating(r, company_ids) for r in reports),
            key=lambda r: r.company_name.lower(),
        )
        return PeerComparison(companies=ratings, total=len(ratings))
