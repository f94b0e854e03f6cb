import json
import logging

from esg_agent.config import get_settings
from esg_agent.services.conversation import ConversationState, ModelTurn, ToolCallRequest

logger = logging.getLogger(__name__)


def build_messages(state: ConversationState) -> list[dict]:
    """Chat-completions message list for the whole conversation so far."""
    messages = [{"role": "system", "content": state.system_prompt}]
    messages.extend(
        {"role": m.role, "content": m.content} for m in state.history if m.content
    )
    messages.append({"role": "user", "content": state.message})

    for rnd in state.rounds:
        messages.append({
            "role": "assistant",
            "content": "\n".join(rnd.turn.texts) or None,
            "tool_calls": [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": json.dumps(call.arguments)},
                }
                for call in rnd.turn.tool_calls
            ],
        })
        for outcome in rnd.outcomes:
            messages.append({
                "role": "tool",
                "tool_call_id": outcome.call.id,
                "content": json.dumps(outcome.response),
            })
    return messages


def _parse_arguments(raw: str | None, name: str) -> dict:
    if not raw:
        return {}
    try:
        args = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Unparseable arguments for {name}: {raw[:200]}")
        return {}
    return args if isinstance(args, dict) else {}


class OpenAIService:
    def __init__(self):
        settings = get_settings()
        self.api_key = settings.openai_api_key
        self.chat_model = settings.chat_model
        self.recommendation_model = settings.recommendation_model
        self.chat_max_tokens = settings.chat_max_tokens
        self.recommendation_max_tokens = settings.recommendation_max_tokens
        self._client = None

    @property
    def client(self):
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def next_action(self, state: ConversationState) -> ModelTurn:
        """One chat round-trip with the declared tools. Errors propagate to the orchestrator."""
        kwargs = {}
        if state.tools:
            kwargs["tools"] = state.tools

        response = await self.client.chat.completions.create(
            model=self.chat_model,
            max_tokens=self.chat_max_tokens,
            messages=build_messages(state),
            **kwargs,
        )

        if not response.choices:
            return ModelTurn()
        message = response.choices[0].message

        turn = ModelTurn()
        if message.content:
            turn.texts.append(message.content)
        for call in message.tool_calls or []:
            turn.tool_calls.append(ToolCallRequest(
                id=call.id,
                name=call.function.name,
                arguments=_parse_arguments(call.function.arguments, call.function.name),
            ))
        return turn

    async def complete_json(self, system_prompt: str, user_prompt: str) -> dict:
        """JSON-only completion. Raises on API failure or unparseable output."""
        response = await self.client.chat.completions.create(
            model=self.recommendation_model,
            max_tokens=self.recommendation_max_tokens,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        raw = response.choices[0].message.content
        return json.loads(raw)
