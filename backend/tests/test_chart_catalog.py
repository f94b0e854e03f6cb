"""Tests for the chart catalog builder and final chart resolution."""
import pytest

from esg_agent.analysis.benchmark_builder import build_benchmark, rank_metric
from esg_agent.analysis.metrics_catalog import get_metric
from esg_agent.schemas.benchmark import PeerRating
from esg_agent.schemas.tools import (
    BenchmarkResult,
    CompaniesResult,
    MetricRankingResult,
    PeerComparisonResult,
    ReportResult,
)
from esg_agent.services.chart_catalog import DEFAULT_CHART_KEYS, build_chart_catalog, resolve_charts


@pytest.fixture
def benchmark_result(oil_gas_peers, company_by_id):
    return BenchmarkResult(benchmark=build_benchmark(company_by_id["alpha"], oil_gas_peers), summary="ok")


def ranking_result(metric, peers):
    config = get_metric(metric)
    ranked, stats = rank_metric(metric, peers)
    return MetricRankingResult(
        metric=metric,
        label=config.label,
        unit=config.unit,
        lower_is_better=config.lower_is_better,
        ranked=ranked,
        stats=stats,
        summary="ok",
    )


class TestBuildChartCatalog:
    def test_benchmark_keys(self, benchmark_result):
        catalog = {}
        build_chart_catalog(benchmark_result, catalog)
        assert set(catalog) == {
            "pillars", "radar", "treemap", "waterfall",
            "boxplots_env", "boxplots_soc", "boxplots_gov",
            "donut_gender", "donut_board", "donut_indir",
            "netzero", "heatmap",
        }
        assert catalog["pillars"].data["overall"] == 54
        assert catalog["heatmap"].model_dump()["selected_id"] == "alpha"
        assert catalog["donut_gender"].model_dump()["colors"] == ["#bc8cff", "#58a6ff"]

    def test_idempotent(self, benchmark_result):
        first, second = {}, {}
        build_chart_catalog(benchmark_result, first)
        build_chart_catalog(benchmark_result, second)
        build_chart_catalog(benchmark_result, second)
        assert {k: v.model_dump() for k, v in first.items()} == {k: v.model_dump() for k, v in second.items()}

    def test_sparse_company_skips_empty_charts(self, company_by_id):
        everest = company_by_id["everest"]
        catalog = {}
        build_chart_catalog(BenchmarkResult(benchmark=build_benchmark(everest, [everest]), summary="ok"), catalog)
        assert "donut_gender" not in catalog
        assert "donut_board" not in catalog
        assert "netzero" not in catalog
        assert "radar" not in catalog
        assert "boxplots_soc" not in catalog
        assert "boxplots_env" in catalog

    def test_later_result_replaces_key(self, oil_gas_peers):
        catalog = {}
        build_chart_catalog(ranking_result("scope_1", oil_gas_peers), catalog)
        assert catalog["percentilebar"].model_dump()["label"] == "Scope 1 Emissions"
        build_chart_catalog(ranking_result("ltifr", oil_gas_peers), catalog)
        assert catalog["percentilebar"].model_dump()["label"] == "LTIFR"
        assert "netzero" not in catalog

    def test_net_zero_ranking_adds_timeline(self, oil_gas_peers):
        catalog = {}
        build_chart_catalog(ranking_result("net_zero_target_year", oil_gas_peers), catalog)
        assert set(catalog) == {"percentilebar", "netzero"}
        assert catalog["netzero"].data[0] == {"id": "delta", "company_name": "Delta Refining", "value": 2040}

    def test_peer_comparison_keys(self):
        result = PeerComparisonResult(
            companies=[PeerRating(id="r1", company_name="Bharat Energy", esg_score=71)],
            selected_name="Bharat Energy",
            summary="ok",
        )
        catalog = {}
        build_chart_catalog(result, catalog)
        assert set(catalog) == {"peer_bars", "gap_leader", "env_scatter", "pillar_stacked"}
        assert catalog["gap_leader"].model_dump()["selected_name"] == "Bharat Energy"

    def test_report_and_listing(self):
        catalog = {}
        build_chart_catalog(ReportResult(summary="ok"), catalog)
        build_chart_catalog(CompaniesResult(summary="ok"), catalog)
        assert list(catalog) == ["report"]


class TestResolveCharts:
    def test_defaults_without_selection(self, benchmark_result):
        catalog = {}
        build_chart_catalog(benchmark_result, catalog)
        charts = resolve_charts(catalog, None)
        assert [c.type for c in charts] == ["pillars", "radar", "waterfall"]
        assert all(c.type in DEFAULT_CHART_KEYS for c in charts)

    def test_selection_drops_missing_keys(self, benchmark_result):
        catalog = {}
        build_chart_catalog(benchmark_result, catalog)
        charts = resolve_charts(catalog, ["heatmap", "peer_bars", "radar"])
        assert [c.type for c in charts] == ["heatmap", "radar"]

    def test_empty_selection_wins_over_defaults(self, benchmark_result):
        catalog = {}
        build_chart_catalog(benchmark_result, catalog)
        assert resolve_charts(catalog, []) == []

    def test_empty_catalog(self):
        assert resolve_charts({}, None) == []
        assert resolve_charts({}, ["pillars"]) == []
