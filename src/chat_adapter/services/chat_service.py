"""Chat service - one templated request/response exchange against the configured endpoint."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from chat_adapter.config import SYSTEM_PROMPT, AdapterConfig, load_adapter_config
from chat_adapter.errors import ExhaustedRetriesError, ExtractionError, TransportError
from chat_adapter.llm.base import LLMTransport
from chat_adapter.models import ChatRequest, ConversationTurn, ResultEnvelope, Role
from chat_adapter.payload import extract_reply, fill_template, find_unresolved, parse_payload
from chat_adapter.payload.template import references
from chat_adapter.services.context_builder import build_context
from chat_adapter.services.history import merge_global_context, truncate_history
from chat_adapter.services.reasoning import split_reasoning

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 1.0
HISTORY_VARIABLE = "MessageHistory"

Sleep = Callable[[float], Awaitable[Any]]
ConfigProvider = Callable[[], AdapterConfig]


def build_headers(api_key: str) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key and api_key.strip():
        headers["Authorization"] = f"Bearer {api_key.strip()}"
    return headers


def build_variables(
    *,
    model: str,
    message: str,
    history: Sequence[ConversationTurn],
    context: str,
    global_context: str,
) -> dict[str, Any]:
    """Values for the recognized template placeholders."""
    return {
        "Model": model,
        "UserMessage": f"{context}\n\nUser: {message}" if context else message,
        "MessageHistory": [t.to_message() for t in history],
        "SystemMessage": global_context if global_context.strip() else SYSTEM_PROMPT,
        "Context": context,
    }


class ChatService:
    """
    Orchestrates one exchange: variables -> template fill -> lenient parse ->
    POST with fixed-delay retry -> reply extraction -> reasoning split.
    The caller's history is never mutated; the updated copy comes back in the result.
    """

    def __init__(
        self,
        transport: LLMTransport,
        *,
        config_provider: ConfigProvider = load_adapter_config,
        sleep: Sleep = asyncio.sleep,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
    ) -> None:
        self._transport = transport
        self._config_provider = config_provider
        self._sleep = sleep
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay

    async def send(self, request: ChatRequest, config: AdapterConfig | None = None) -> ResultEnvelope:
        """Run one exchange. Raises ExhaustedRetriesError when every attempt fails."""
        config = config or self._config_provider()
        model = request.model or config.default_model

        history = merge_global_context(request.history, config.global_context)
        context = build_context(history, request.context_items)
        history.append(ConversationTurn(role=Role.USER, content=request.message))
        history = truncate_history(history, config.history_limit)

        variables = build_variables(
            model=model,
            message=request.message,
            history=history,
            context=context,
            global_context=config.global_context,
        )
        payload = self.build_payload(config.payload_template, variables, model=model)
        reply = await self._request_with_retry(config, payload, build_headers(config.api_key))

        split = split_reasoning(reply, config.reasoning_end_tag, config.reasoning_display)
        history.append(ConversationTurn(role=Role.ASSISTANT, content=reply))
        return ResultEnvelope(
            content=split.display_markup,
            raw_content=reply,
            reasoning=split.reasoning,
            history=history,
        )

    def build_payload(self, template: str, variables: dict[str, Any], *, model: str) -> dict[str, Any]:
        """Request body from the template, falling back to {model, messages}."""
        if "\x00" in template:
            logger.warning("Payload template contains null characters, removing them")
            template = template.replace("\x00", "")
        logger.debug("Payload template length: %s", len(template))

        filled = fill_template(template, variables)
        unresolved = find_unresolved(filled)
        if unresolved:
            logger.warning("Template still contains unprocessed variables: %s", unresolved)

        messages = variables[HISTORY_VARIABLE]
        payload = parse_payload(filled, model=model, messages=messages)
        # Templates with a hardcoded messages list still get the real conversation.
        if not references(template, HISTORY_VARIABLE) and "messages" in payload:
            payload["messages"] = list(messages)
        return payload

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._retry_delay),
            retry=retry_if_exception_type((TransportError, ExtractionError)),
            sleep=self._sleep,
        )

    async def _request_with_retry(
        self,
        config: AdapterConfig,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> str:
        attempts = 0
        reply = ""
        try:
            async for attempt in self._retrying():
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    reply = await self._attempt(config, payload, headers, attempts)
        except (TransportError, ExtractionError) as e:
            logger.error("All %s attempts to get a response failed: %s", attempts, e)
            raise ExhaustedRetriesError(attempts, e) from e
        return reply

    async def _attempt(
        self,
        config: AdapterConfig,
        payload: dict[str, Any],
        headers: dict[str, str],
        number: int,
    ) -> str:
        try:
            try:
                response = await self._transport.post_json(
                    config.endpoint,
                    payload,
                    headers=headers,
                    timeout=config.request_timeout,
                )
            except TransportError:
                raise
            except Exception as e:
                raise TransportError(f"Request to {config.endpoint} failed: {e!r}") from e
            if not response.ok:
                raise TransportError(f"HTTP error {response.status_code}", status_code=response.status_code)
            try:
                data = json.loads(response.text)
            except json.JSONDecodeError as e:
                raise TransportError(
                    f"Response body is not valid JSON: {e}",
                    status_code=response.status_code,
                ) from e
            return extract_reply(data, config.response_path)
        except (TransportError, ExtractionError) as e:
            logger.warning("API request failed (attempt %s/%s): %s", number, self._max_attempts, e)
            raise
