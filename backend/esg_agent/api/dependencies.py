from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from esg_agent.database import SessionLocal, get_db
from esg_agent.services.benchmark_service import BenchmarkService
from esg_agent.services.company_repository import CompanyRepository
from esg_agent.services.openai_service import OpenAIService


def get_repository(db: AsyncSession = Depends(get_db)) -> CompanyRepository:
    return CompanyRepository(db)


def get_benchmark_service(repository: CompanyRepository = Depends(get_repository)) -> BenchmarkService:
    return BenchmarkService(repository)


def get_llm() -> OpenAIService:
    """Chat model used by /chat. Override in tests with a scripted stand-in."""
    return OpenAIService()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives the request handler, such as a streamed response."""
    return SessionLocal
