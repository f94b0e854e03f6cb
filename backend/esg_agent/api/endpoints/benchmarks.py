from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from esg_agent.analysis.simulation import score_trajectory, simulate_scores
from esg_agent.api.dependencies import get_benchmark_service
from esg_agent.api.validation import parse_peer_ids, validate_company_id
from esg_agent.schemas.benchmark import (
    CompanyBenchmark,
    PeerComparison,
    SimulationRequest,
    SimulationResult,
)
from esg_agent.services.benchmark_service import BenchmarkService
from esg_agent.services.company_repository import CompanyNotFoundError

router = APIRouter(prefix="/benchmarks", tags=["benchmarks"])


@router.get("/company/{company_id}", response_model=CompanyBenchmark)
async def get_company_benchmark(
    company_id: str,
    peer_ids: str | None = Query(None, description="Comma-separated peer company ids"),
    service: BenchmarkService = Depends(get_benchmark_service),
):
    company_id = validate_company_id(company_id)
    try:
        return await service.get_company_benchmark(company_id, parse_peer_ids(peer_ids))
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail=f"Company '{company_id}' not found")


@router.get("/peer-comparison", response_model=PeerComparison)
async def get_peer_comparison(service: BenchmarkService = Depends(get_benchmark_service)):
    return await service.get_peer_comparison()


@router.post("/simulate", response_model=SimulationResult)
async def simulate(
    request: SimulationRequest,
    service: BenchmarkService = Depends(get_benchmark_service),
):
    company_id = validate_company_id(request.company_id)
    try:
        benchmark = await service.get_company_benchmark(company_id, request.peer_ids)
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail=f"Company '{company_id}' not found")

    unknown = sorted(set(request.overrides) - set(benchmark.percentiles))
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown metrics: {', '.join(unknown)}")
    if any(not 0 <= v <= 100 for v in request.overrides.values()):
        raise HTTPException(status_code=400, detail="Simulated percentiles must be between 0 and 100")

    baseline = simulate_scores(benchmark.percentiles)
    projected = simulate_scores(benchmark.percentiles, request.overrides)
    trajectory = score_trajectory(
        benchmark.pillar_scores.overall,
        baseline.overall,
        projected.overall,
        datetime.now(timezone.utc).year,
    )
    return SimulationResult(
        company_id=company_id,
        current=benchmark.pillar_scores,
        baseline=baseline,
        projected=projected,
        trajectory=trajectory,
    )
