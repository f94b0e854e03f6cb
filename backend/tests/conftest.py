"""Shared test fixtures: a four-company oil & gas peer set plus one outsider."""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from esg_agent.database import Base
from esg_agent.models.company import EsgCompany, EsgReport
from esg_agent.services.benchmark_service import BenchmarkService
from esg_agent.services.company_repository import CompanyRepository
from esg_agent.services.conversation import ModelTurn, ToolCallRequest
from esg_agent.services.recommendation_service import RecommendationService
from esg_agent.services.tool_registry import ToolRegistry

OIL_GAS = "Oil & Gas"

COMPANIES = [
    {
        "id": "alpha", "serial_number": 1, "company_name": "Alpha Petroleum", "bse_code": "500001", "sector": OIL_GAS,
        "scope_1": 500, "scope_2": 100, "emissions_intensity": 2.0, "net_zero_target_year": 2050,
        "energy_consumption": 1000, "renewable_energy": 100, "water_consumption": 5000, "total_waste": 300,
        "female_employees": 200, "employees": 1000, "board_women_percent": 20,
        "median_remuneration_female": 90, "median_remuneration_male": 100, "ltifr": 0.5,
        "employee_turnover_rate": 8, "independent_directors_percent": 50, "data_breaches": 0,
    },
    {
        "id": "bharat", "serial_number": 2, "company_name": "Bharat Energy", "bse_code": "500002", "sector": OIL_GAS,
        "scope_1": 300, "scope_2": 150, "emissions_intensity": 1.5, "net_zero_target_year": 2045,
        "energy_consumption": 2000, "renewable_energy": 400, "water_consumption": 4000, "total_waste": 250,
        "female_employees": 300, "employees": 1000, "board_women_percent": 25,
        "median_remuneration_female": 95, "median_remuneration_male": 100, "ltifr": 0.3,
        "employee_turnover_rate": 6, "independent_directors_percent": 60, "data_breaches": 1,
    },
    {
        "id": "coastal", "serial_number": 3, "company_name": "Coastal Gas", "bse_code": "500003", "sector": OIL_GAS,
        "scope_1": 800, "scope_2": 200, "emissions_intensity": 3.0, "net_zero_target_year": 2060,
        "energy_consumption": 500, "renewable_energy": 25, "water_consumption": 7000, "total_waste": 500,
        "female_employees": 100, "employees": 1000, "board_women_percent": 10,
        "median_remuneration_female": 80, "median_remuneration_male": 100, "ltifr": 0.9,
        "employee_turnover_rate": 12, "independent_directors_percent": 40, "data_breaches": 2,
    },
    {
        "id": "delta", "serial_number": 4, "company_name": "Delta Refining", "bse_code": "500004", "sector": OIL_GAS,
        "scope_1": 200, "scope_2": 80, "emissions_intensity": 1.0, "net_zero_target_year": 2040,
        "energy_consumption": 1000, "renewable_energy": 300, "water_consumption": 3000, "total_waste": 200,
        "female_employees": 400, "employees": 1000, "board_women_percent": 30,
        "median_remuneration_female": 100, "median_remuneration_male": 100, "ltifr": 0.2,
        "employee_turnover_rate": 5, "independent_directors_percent": 70, "data_breaches": 0,
    },
    {
        "id": "everest", "serial_number": 5, "company_name": "Everest Textiles", "bse_code": "500005",
        "sector": "Textiles", "scope_1": 50, "employees": 0, "female_employees": 0,
    },
]

REPORTS = [
    {"id": "r1", "company_name": "Bharat Energy", "esg_score": "71", "environment_score": "65.5",
     "social_score": "72", "governance_score": "75", "latest_report_date": "2024-06-30"},
    {"id": "r2", "company_name": "Alpha Petroleum", "esg_score": "62.5", "environment_score": "55",
     "social_score": "70 / 100", "governance_score": "0", "latest_report_date": "2024-03-31"},
    {"id": "r3", "company_name": "Unlisted Holdings", "esg_score": "40"},
]


@pytest.fixture
def oil_gas_peers():
    return [dict(c) for c in COMPANIES if c["sector"] == OIL_GAS]


@pytest.fixture
def company_by_id():
    return {c["id"]: dict(c) for c in COMPANIES}


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(EsgCompany(**c) for c in COMPANIES)
        session.add_all(EsgReport(**r) for r in REPORTS)
        await session.commit()

    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


class ScriptedModel:
    """Stand-in chat model that replays a fixed list of turns.

    Each entry is either a ModelTurn or a callable(state) -> ModelTurn.
    Once the script runs out, `repeat_last` keeps returning the last turn.
    """

    def __init__(self, turns, configured=True, repeat_last=False):
        self.turns = list(turns)
        self.configured = configured
        self.repeat_last = repeat_last
        self.calls = 0
        self.states = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def next_action(self, state):
        self.states.append(state)
        index = self.calls
        self.calls += 1
        if index >= len(self.turns):
            if not self.repeat_last:
                return ModelTurn(texts=["Done."])
            index = len(self.turns) - 1
        turn = self.turns[index]
        return turn(state) if callable(turn) else turn


def tool_call(name, call_id=None, **arguments):
    return ToolCallRequest(id=call_id or f"call_{name}", name=name, arguments=arguments)


@pytest.fixture
def scripted_model():
    return ScriptedModel


class FakeJsonModel:
    """Stand-in for the JSON completion used by the recommendation generator."""

    def __init__(self, payload=None, error=None, configured=True):
        self.payload = payload
        self.error = error
        self.configured = configured
        self.prompts = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def complete_json(self, system_prompt, user_prompt):
        self.prompts.append(user_prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest_asyncio.fixture
async def registry(db_session):
    return ToolRegistry(
        BenchmarkService(CompanyRepository(db_session)),
        RecommendationService(None, OIL_GAS),
    )
