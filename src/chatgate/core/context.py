# src/chatgate/core/context.py
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from chatgate.adapters.base import TextProvider
from chatgate.core.config import GatewaySettings
from chatgate.core.gateway import CompletionGateway
from chatgate.core.prober import ModelProber
from chatgate.core.registry import SessionRegistry


@dataclass
class AppContext:
    """Everything a request handler needs; owned by one FastAPI app."""
    settings: GatewaySettings
    registry: SessionRegistry
    prober: ModelProber
    gateway: CompletionGateway

    @classmethod
    def build(
        cls,
        settings: GatewaySettings,
        provider: TextProvider,
        registry: SessionRegistry | None = None,
    ) -> "AppContext":
        return cls(
            settings=settings,
            registry=registry if registry is not None else SessionRegistry(),
            prober=ModelProber(provider, settings.model_candidates, settings.probe_prompt),
            gateway=CompletionGateway(provider, settings),
        )


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx
