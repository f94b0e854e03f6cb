"""HTTP endpoint tests over the ASGI app with the database and model overridden."""
import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import ScriptedModel, tool_call
from esg_agent.api.dependencies import get_llm, get_session_factory
from esg_agent.database import get_db
from esg_agent.main import app
from esg_agent.services.conversation import ModelTurn
from esg_agent.services.tool_registry import CHART_SELECTION_TOOL


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def use_model(model):
    app.dependency_overrides[get_llm] = lambda: model


def parse_frames(body: str) -> list[dict]:
    frames = [f for f in body.split("\n\n") if f]
    assert all(f.startswith("data: ") for f in frames)
    return [json.loads(f[len("data: "):]) for f in frames]


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestCompanies:
    @pytest.mark.asyncio
    async def test_list(self, client):
        response = await client.get("/companies")
        assert response.status_code == 200
        names = [c["company_name"] for c in response.json()]
        assert names == ["Alpha Petroleum", "Bharat Energy", "Coastal Gas", "Delta Refining", "Everest Textiles"]

    @pytest.mark.asyncio
    async def test_sectors(self, client):
        response = await client.get("/companies/sectors")
        assert response.json() == ["Oil & Gas", "Textiles"]

    @pytest.mark.asyncio
    async def test_get_one(self, client):
        response = await client.get("/companies/alpha")
        assert response.status_code == 200
        assert response.json()["bse_code"] == "500001"
        assert response.json()["scope_1"] == 500

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.get("/companies/ghost")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_id(self, client):
        response = await client.get("/companies/bad.id")
        assert response.status_code == 400


class TestBenchmarks:
    @pytest.mark.asyncio
    async def test_company_benchmark(self, client):
        response = await client.get("/benchmarks/company/alpha")
        assert response.status_code == 200
        body = response.json()
        assert body["pillar_scores"] == {"environmental": 53, "social": 49, "governance": 61, "overall": 54}
        assert body["percentiles"]["scope_1"] == 50
        assert body["peer_count"] == 4
        assert body["gap_analysis"]["scope_1"]["leader_name"] == "Delta Refining"

    @pytest.mark.asyncio
    async def test_explicit_peer_set(self, client):
        response = await client.get("/benchmarks/company/alpha", params={"peer_ids": "delta,coastal"})
        assert response.json()["peer_count"] == 3

    @pytest.mark.asyncio
    async def test_invalid_peer_id(self, client):
        response = await client.get("/benchmarks/company/alpha", params={"peer_ids": "delta,bad id"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_company(self, client):
        response = await client.get("/benchmarks/company/ghost")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_peer_comparison(self, client):
        response = await client.get("/benchmarks/peer-comparison")
        body = response.json()
        assert body["total"] == 2
        bharat = body["companies"][1]
        assert bharat["company_id"] == "bharat"
        assert bharat["environment_score"] == 65.5

    @pytest.mark.asyncio
    async def test_simulate(self, client):
        response = await client.post(
            "/benchmarks/simulate", json={"company_id": "alpha", "overrides": {"scope_1": 100}}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["current"]["overall"] == 54
        assert body["baseline"]["overall"] == 54
        assert body["projected"]["environmental"] == 63
        assert body["projected"]["overall"] == 57
        assert [p["score"] for p in body["trajectory"]] == [54, 55, 57]
        years = [p["year"] for p in body["trajectory"]]
        assert years == [years[0], years[0] + 1, years[0] + 2]

    @pytest.mark.asyncio
    async def test_simulate_unknown_metric(self, client):
        response = await client.post(
            "/benchmarks/simulate", json={"company_id": "alpha", "overrides": {"karma": 90}}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_simulate_out_of_range(self, client):
        response = await client.post(
            "/benchmarks/simulate", json={"company_id": "alpha", "overrides": {"scope_1": 150}}
        )
        assert response.status_code == 400


class TestChat:
    @pytest.mark.asyncio
    async def test_stream(self, client):
        use_model(ScriptedModel([
            ModelTurn(texts=["Checking."], tool_calls=[
                tool_call("get_company_benchmark"),
                tool_call(CHART_SELECTION_TOOL, chart_keys=["radar"]),
            ]),
            ModelTurn(texts=["Alpha sits mid-table."]),
        ]))
        response = await client.post("/chat", json={"message": "How are we doing?", "companyId": "alpha"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = parse_frames(response.text)
        assert [f["type"] for f in frames] == ["text", "tool_call", "tool_result", "text", "done"]
        assert frames[1]["callId"] == frames[2]["callId"]
        assert frames[1]["tool"] == "get_company_benchmark"
        assert [c["type"] for c in frames[-1]["charts"]] == ["radar"]

    @pytest.mark.asyncio
    async def test_peer_ids_and_history(self, client):
        model = ScriptedModel([ModelTurn(tool_calls=[tool_call("get_company_benchmark")])])
        use_model(model)
        response = await client.post("/chat", json={
            "message": "Compare with Delta only",
            "companyId": "alpha",
            "peerIds": ["delta"],
            "history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
        })

        frames = parse_frames(response.text)
        assert frames[-1]["type"] == "done"
        assert frames[-1]["charts"][0]["data"]["overall"] is not None
        assert [m.content for m in model.states[0].history] == ["hi", "hello"]
        assert "Selected company ID: alpha" in model.states[0].system_prompt
        result = model.states[0].rounds[0].outcomes[0].response["content"]
        assert result["benchmark"]["peer_count"] == 2

    @pytest.mark.asyncio
    async def test_unconfigured_model(self, client):
        use_model(ScriptedModel([], configured=False))
        response = await client.post("/chat", json={"message": "hello"})
        frames = parse_frames(response.text)
        assert len(frames) == 1
        assert frames[0]["type"] == "error"

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, client):
        use_model(ScriptedModel([]))
        response = await client.post("/chat", json={"message": ""})
        assert response.status_code == 422
