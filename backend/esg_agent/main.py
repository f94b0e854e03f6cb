import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from esg_agent.api.endpoints import benchmarks, chat, companies
from esg_agent.config import get_settings

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="ESG Benchmark Agent API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(companies.router)
app.include_router(benchmarks.router)
app.include_router(chat.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.on_event("startup")
async def startup():
    from esg_agent.database import engine, Base
    import esg_agent.models  # noqa: F401  registers tables on Base.metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.getLogger(__name__).info("Database tables created")
