from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = ""


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    company_id: str | None = Field(default=None, alias="companyId")
    history: list[HistoryMessage] = []
    peer_ids: list[str] | None = Field(default=None, alias="peerIds")


class ChartSpec(BaseModel):
    """One visualizable data slice. Type-specific fields ride along as extras."""
    model_config = ConfigDict(extra="allow")

    type: str
    title: str
    data: Any = None


class TextEvent(BaseModel):
    type: Literal["text"] = "text"
    content: str


class ToolCallEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["tool_call"] = "tool_call"
    tool: str
    input: dict = {}
    call_id: str = Field(alias="callId")


class ToolResultEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["tool_result"] = "tool_result"
    tool: str
    call_id: str = Field(alias="callId")
    summary: str


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"
    charts: list[ChartSpec] = []
    truncated: bool = False  # iteration cap reached before the model finished


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


ChatEvent = Annotated[
    TextEvent | ToolCallEvent | ToolResultEvent | DoneEvent | ErrorEvent,
    Field(discriminator="type"),
]
