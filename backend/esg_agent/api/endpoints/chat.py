import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from esg_agent.api.dependencies import get_llm, get_session_factory
from esg_agent.config import get_settings
from esg_agent.schemas.chat import ChatRequest
from esg_agent.services.benchmark_service import BenchmarkService
from esg_agent.services.chat_orchestrator import ChatOrchestrator
from esg_agent.services.company_repository import CompanyRepository
from esg_agent.services.conversation import RequestContext
from esg_agent.services.prompts import build_chat_system_prompt
from esg_agent.services.recommendation_service import RecommendationService
from esg_agent.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def _watch_disconnect(request: Request, ctx: RequestContext, interval: float):
    while not ctx.aborted:
        if await request.is_disconnected():
            ctx.abort()
            return
        await asyncio.sleep(interval)


@router.post("/chat")
async def chat(
    body: ChatRequest,
    request: Request,
    llm=Depends(get_llm),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    settings = get_settings()
    ctx = RequestContext(company_id=body.company_id, peer_ids=body.peer_ids)
    system_prompt = build_chat_system_prompt(settings.sector_label, body.company_id)

    async def event_stream():
        watcher = asyncio.create_task(_watch_disconnect(request, ctx, settings.disconnect_poll_interval))
        try:
            async with session_factory() as db:
                registry = ToolRegistry(
                    BenchmarkService(CompanyRepository(db)),
                    RecommendationService(llm, settings.sector_label),
                )
                orchestrator = ChatOrchestrator(llm, registry, system_prompt, settings.chat_max_iterations)
                async for event in orchestrator.run(body.message, body.history, ctx):
                    yield f"data: {event.model_dump_json(by_alias=True)}\n\n"
        finally:
            watcher.cancel()

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)
