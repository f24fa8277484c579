# src/chatgate/api/routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from chatgate.core.context import AppContext, get_context
from chatgate.core.errors import (
    CredentialError,
    GatewayError,
    ProviderError,
    SessionMissingError,
    ValidationError,
)
from chatgate.core.logging import mask_key
from chatgate.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    SetupRequest,
    SetupResponse,
    StatusResponse,
)

logger = logging.getLogger(__name__)

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

router = APIRouter(prefix="/api", tags=["gateway"])


@router.post("/setup", response_model=SetupResponse, responses=_ERRORS)
async def setup(req: SetupRequest, ctx: AppContext = Depends(get_context)) -> SetupResponse:
    """
    Register an API key under a session id.

    Probes the candidate models in order and stores the first one that
    answers. Nothing is stored when no model works.
    """
    if not req.api_key:
        raise ValidationError("API key is required")

    session_id = req.session_id if req.session_id is not None else ctx.settings.default_session_id
    logger.info("setup: session=%s key=%s", session_id, mask_key(req.api_key))

    model = await ctx.prober.probe(req.api_key)
    if not model:
        raise CredentialError("No working model found with this API key. Please check your key.")

    try:
        ctx.registry.put(session_id, req.api_key, model)
    except Exception as exc:
        logger.exception("setup: session=%s failed", session_id)
        raise GatewayError(f"Setup failed: {exc}") from exc
    return SetupResponse(model=model, message=f"Setup successful! Using {model}")


@router.post("/chat", response_model=ChatResponse, responses=_ERRORS)
async def chat(req: ChatRequest, ctx: AppContext = Depends(get_context)) -> ChatResponse:
    """
    Forward one message to the model stored for the session.

    tone / responseLength / temperature / customPrompt shape the system
    instruction; defaults come from gateway.yml.
    """
    if not req.message:
        raise ValidationError("Message is required")

    s = ctx.settings
    session_id = req.session_id if req.session_id is not None else s.default_session_id
    session = ctx.registry.get(session_id)
    if session is None:
        raise SessionMissingError("Please setup your API key first by visiting /setup")

    try:
        result = await ctx.gateway.complete(
            session,
            req.message,
            custom_prompt=req.custom_prompt,
            tone=req.tone if req.tone is not None else s.default_tone,
            length_level=req.response_length if req.response_length is not None else s.default_length,
            temperature=req.temperature if req.temperature is not None else s.default_temperature,
        )
    except ValidationError:
        raise
    except ProviderError as exc:
        logger.error("chat: session=%s model=%s provider error: %s", session_id, session.model, exc.message)
        raise ProviderError(f"Chat failed: {exc.message}", model=exc.model, status=exc.status) from exc
    except Exception as exc:
        logger.exception("chat: session=%s failed", session_id)
        raise GatewayError(f"Chat failed: {exc}") from exc

    return ChatResponse(response=result.text, model_used=result.model)


@router.get("/status", response_model=StatusResponse)
async def status(ctx: AppContext = Depends(get_context)) -> StatusResponse:
    return StatusResponse(active_sessions=ctx.registry.count())
