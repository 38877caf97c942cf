"""FastAPI application - chat endpoint, model list and health."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException

from chat_adapter.config import load_adapter_config
from chat_adapter.errors import ExhaustedRetriesError
from chat_adapter.llm import HttpxTransport
from chat_adapter.models import ChatRequest, ResultEnvelope
from chat_adapter.services import ChatService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Dependency injection - created at startup
_service: ChatService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _service
    transport = HttpxTransport()
    _service = ChatService(transport)
    yield
    _service = None
    await transport.aclose()


app = FastAPI(
    title="Chat Adapter",
    description="Templated request/response adapter for arbitrary LLM chat endpoints",
    version="0.1.0",
    lifespan=lifespan,
)


def get_chat_service() -> ChatService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _service


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check for load balancers."""
    return {"status": "ok"}


@app.get("/models")
async def models() -> dict[str, object]:
    """Configured models; the first one is used when a request names none."""
    config = load_adapter_config()
    return {"models": config.model_list, "default": config.default_model}


@app.post("/chat", response_model=ResultEnvelope, response_model_by_alias=True)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ResultEnvelope:
    """
    One exchange. The caller keeps the conversation: send the returned history
    back with the next message.
    """
    try:
        return await service.send(request)
    except ExhaustedRetriesError as e:
        logger.warning("Chat exchange failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail="Failed to get a response. Please try again.",
        ) from e
