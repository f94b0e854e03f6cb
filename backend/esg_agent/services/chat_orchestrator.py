"""
Chat orchestrator - drives the model through a bounded tool-calling loop.

Each round: ask the model for its next action, stream its text parts,
then run the requested tools one at a time in the order given and feed
all results back. The loop ends on a text-only turn or when the round
cap is reached; the chart catalog built along the way is resolved into
the final `done` event. Every stream ends with exactly one `done` or
`error` event.
"""
import logging
import uuid
from collections.abc import AsyncIterator

from esg_agent.schemas.chat import (
    DoneEvent,
    ErrorEvent,
    HistoryMessage,
    TextEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from esg_agent.services.chart_catalog import build_chart_catalog, resolve_charts
from esg_agent.services.conversation import (
    ConversationModel,
    ConversationState,
    RequestAborted,
    RequestContext,
    Round,
    ToolCallRequest,
    ToolOutcome,
)
from esg_agent.services.tool_registry import CHART_SELECTION_TOOL, ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10


class ChatOrchestrator:
    def __init__(
        self,
        model: ConversationModel,
        registry: ToolRegistry,
        system_prompt: str,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        self.model = model
        self.registry = registry
        self.system_prompt = system_prompt
        self.max_iterations = max_iterations

    async def run(
        self,
        message: str,
        history: list[HistoryMessage],
        ctx: RequestContext,
    ) -> AsyncIterator:
        if not self.model.is_configured:
            yield ErrorEvent(message="OPENAI_API_KEY not configured. Add it to backend/.env")
            return

        state = ConversationState(
            system_prompt=self.system_prompt,
            message=message,
            history=list(history),
            tools=self.registry.declarations(),
        )
        truncated = False

        try:
            for _ in range(self.max_iterations):
                turn = await ctx.guard(self.model.next_action(state))

                for text in turn.texts:
                    if text:
                        yield TextEvent(content=text)

                if not turn.tool_calls:
                    break

                outcomes = []
                for call in turn.tool_calls:
                    if call.name == CHART_SELECTION_TOOL:
                        outcomes.append(self._select_charts(call, ctx))
                        continue

                    call_id = f"{call.name}-{uuid.uuid4().hex[:8]}"
                    yield ToolCallEvent(tool=call.name, input=call.arguments, call_id=call_id)
                    try:
                        outcome, summary = await self._dispatch(call, ctx)
                    except RequestAborted:
                        yield ToolResultEvent(tool=call.name, call_id=call_id, summary="Error: Request cancelled")
                        raise
                    yield ToolResultEvent(tool=call.name, call_id=call_id, summary=summary)
                    outcomes.append(outcome)

                state.rounds.append(Round(turn=turn, outcomes=outcomes))
            else:
                truncated = True
                logger.warning(f"Chat loop hit the {self.max_iterations}-round cap; returning partial results")

        except RequestAborted:
            logger.info("Client disconnected; chat request aborted")
            yield ErrorEvent(message="Request cancelled")
            return
        except Exception as e:
            logger.exception("Chat error")
            yield ErrorEvent(message=str(e) or "Internal server error")
            return

        yield DoneEvent(charts=resolve_charts(ctx.catalog, ctx.selected_chart_keys), truncated=truncated)

    def _select_charts(self, call: ToolCallRequest, ctx: RequestContext) -> ToolOutcome:
        keys = call.arguments.get("chart_keys") or []
        if not isinstance(keys, list):
            keys = []
        acknowledged = ctx.select_charts(keys)
        return ToolOutcome(call=call, response={"success": True, "acknowledged": acknowledged})

    async def _dispatch(self, call: ToolCallRequest, ctx: RequestContext) -> tuple[ToolOutcome, str]:
        """Run one tool. Failures become an error payload for the model, never an exception."""
        try:
            result = await self.registry.execute(call.name, call.arguments, ctx)
            build_chart_catalog(result, ctx.catalog)
        except RequestAborted:
            raise
        except Exception as e:
            logger.warning(f"Tool {call.name} failed: {e}")
            return ToolOutcome(call=call, response={"error": str(e)}), f"Error: {e}"

        return (
            ToolOutcome(call=call, response={"content": result.model_dump(mode="json")}),
            result.summary or "Done",
        )
