"""Tests for the full benchmark object and metric rankings."""
import pytest

from esg_agent.analysis.benchmark_builder import build_benchmark, peer_order, rank_metric
from esg_agent.analysis.metrics_catalog import HEATMAP_METRICS, METRICS
from esg_agent.analysis.sector_benchmarks import compute_sector_stats


@pytest.fixture
def alpha_benchmark(oil_gas_peers, company_by_id):
    return build_benchmark(company_by_id["alpha"], oil_gas_peers)


class TestBuildBenchmark:
    def test_core_fields(self, alpha_benchmark):
        assert alpha_benchmark.company["company_name"] == "Alpha Petroleum"
        assert alpha_benchmark.company["renewable_energy_pct"] == pytest.approx(10.0)
        assert alpha_benchmark.peer_count == 4
        assert alpha_benchmark.percentiles["scope_1"] == 50
        assert alpha_benchmark.normalized_scores["scope_1"] == 50
        assert alpha_benchmark.pillar_scores.overall == 54
        assert set(alpha_benchmark.percentiles) == set(METRICS)

    def test_boxplots_cover_every_metric(self, alpha_benchmark):
        assert [e.metric for e in alpha_benchmark.boxplot_data] == list(METRICS)
        scope_1 = alpha_benchmark.boxplot_data[0]
        assert scope_1.company_value == 500
        assert (scope_1.min, scope_1.p50, scope_1.max) == (200, 500, 800)

    def test_compositions(self, alpha_benchmark):
        gender = {s.name: s.value for s in alpha_benchmark.gender_composition}
        assert gender == {"Female": 200, "Male": 800}
        board = {s.name: s.value for s in alpha_benchmark.board_composition}
        assert board == {"Women": 20, "Men": 80}
        independence = {s.name: s.value for s in alpha_benchmark.board_independence_composition}
        assert independence == {"Independent": 50, "Non-Independent": 50}

    def test_net_zero_ranked_ascending(self, alpha_benchmark):
        assert [e.value for e in alpha_benchmark.net_zero_ranked] == [2040, 2045, 2050, 2060]
        assert alpha_benchmark.net_zero_ranked[0].company_name == "Delta Refining"

    def test_net_zero_placeholder_years_dropped(self, oil_gas_peers, company_by_id):
        peers = [dict(p) for p in oil_gas_peers]
        peers[0]["net_zero_target_year"] = 2020
        benchmark = build_benchmark(company_by_id["bharat"], peers)
        assert len(benchmark.net_zero_ranked) == 3

    def test_heatmap(self, alpha_benchmark):
        assert alpha_benchmark.heatmap_metrics == list(HEATMAP_METRICS)
        assert len(alpha_benchmark.heatmap_data) == 4
        delta_row = next(r for r in alpha_benchmark.heatmap_data if r["id"] == "delta")
        assert delta_row["company_name"] == "Delta Refining"
        assert all(delta_row[m] == 100 for m in HEATMAP_METRICS)

    def test_sole_company_degrades_to_nulls(self, company_by_id):
        everest = company_by_id["everest"]
        benchmark = build_benchmark(everest, [everest])
        assert benchmark.peer_count == 1
        assert benchmark.percentiles["scope_1"] == 100
        assert benchmark.normalized_scores["scope_1"] is None
        assert benchmark.pillar_scores.overall is None
        assert benchmark.gender_composition is None
        assert benchmark.board_composition is None
        assert benchmark.net_zero_ranked == []
        assert benchmark.radar_data == []


class TestRankMetric:
    def test_ranked_best_first(self, oil_gas_peers):
        ranked, stats = rank_metric("scope_1", oil_gas_peers)
        assert [r.id for r in ranked] == ["delta", "bharat", "alpha", "coastal"]
        assert [r.normalized_score for r in ranked] == [100, 83, 50, 0]
        assert [r.percentile for r in ranked] == [100, 75, 50, 25]
        assert stats.count == 4

    def test_derived_metric(self, oil_gas_peers):
        ranked, _ = rank_metric("gender_diversity_pct", oil_gas_peers)
        assert [r.id for r in ranked] == ["delta", "bharat", "alpha", "coastal"]

    def test_unknown_metric(self, oil_gas_peers):
        with pytest.raises(ValueError, match="Unknown metric"):
            rank_metric("carbon_karma", oil_gas_peers)

    def test_peers_without_value_are_skipped(self, oil_gas_peers, company_by_id):
        ranked, _ = rank_metric("ltifr", oil_gas_peers + [company_by_id["everest"]])
        assert len(ranked) == 4


class TestPeerOrder:
    def test_direction(self, oil_gas_peers):
        enriched, _ = compute_sector_stats(oil_gas_peers)
        assert [p["id"] for p in peer_order("ltifr", enriched)] == ["delta", "bharat", "alpha", "coastal"]
        assert [p["id"] for p in peer_order("board_women_percent", enriched)] == [
            "delta", "bharat", "alpha", "coastal",
        ]
