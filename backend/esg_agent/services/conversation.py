"""
Request-scoped conversation state shared by the orchestrator, the tool
registry, the chart catalog and the chat model.

Nothing here outlives a single /chat request.
"""
import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from esg_agent.schemas.chat import ChartSpec, HistoryMessage

T = TypeVar("T")


class RequestAborted(Exception):
    """The client went away; in-flight work for the request was cancelled."""


@dataclass
class ToolCallRequest:
    id: str
    name: str
    arguments: dict = field(default_factory=dict)


@dataclass
class ModelTurn:
    """One model response: text parts in arrival order, then requested tool calls in order."""
    texts: list[str] = field(default_factory=list)
    tool_calls: list[ToolCallRequest] = field(default_factory=list)


@dataclass
class ToolOutcome:
    call: ToolCallRequest
    response: dict  # payload fed back to the model


@dataclass
class Round:
    turn: ModelTurn
    outcomes: list[ToolOutcome]


@dataclass
class ConversationState:
    system_prompt: str
    message: str
    history: list[HistoryMessage] = field(default_factory=list)
    tools: list[dict] = field(default_factory=list)  # tool declarations offered to the model
    rounds: list[Round] = field(default_factory=list)

    @property
    def iteration(self) -> int:
        return len(self.rounds)


class ConversationModel(Protocol):
    """Decides the next action: answer with text only, or request tool calls."""

    @property
    def is_configured(self) -> bool: ...

    async def next_action(self, state: ConversationState) -> ModelTurn: ...


@dataclass
class RequestContext:
    company_id: str | None = None
    peer_ids: list[str] | None = None
    catalog: dict[str, ChartSpec] = field(default_factory=dict)
    selected_chart_keys: list[str] | None = None  # None until the model selects charts
    abort_event: asyncio.Event = field(default_factory=asyncio.Event)

    @property
    def aborted(self) -> bool:
        return self.abort_event.is_set()

    def abort(self) -> None:
        self.abort_event.set()

    def select_charts(self, keys: list[str]) -> list[str]:
        """Record the model's chart choice. A later selection replaces an earlier one."""
        ordered = list(dict.fromkeys(k for k in keys if isinstance(k, str)))
        self.selected_chart_keys = ordered
        return ordered

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await `awaitable` unless the request is aborted first, in which case
        the pending work is cancelled and RequestAborted is raised.
        """
        if self.aborted:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestAborted()

        task = asyncio.ensure_future(awaitable)
        abort_wait = asyncio.ensure_future(self.abort_event.wait())
        try:
            done, _ = await asyncio.wait({task, abort_wait}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            abort_wait.cancel()

        if task in done:
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise RequestAborted()
