# src/chatgate/core/gateway.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from chatgate.adapters.base import TextProvider
from chatgate.core.config import GatewaySettings
from chatgate.core.instructions import (
    build_system_instruction,
    generation_config,
    parse_temperature,
)
from chatgate.core.registry import Session

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    text: str
    model: str


class CompletionGateway:
    """
    Shape one chat request and forward it to the session's model.

    Exactly one provider call per complete(); a failure propagates as
    ProviderError, nothing is retried.
    """

    def __init__(self, provider: TextProvider, settings: GatewaySettings) -> None:
        self.provider = provider
        self.settings = settings

    def system_instruction(self, custom_prompt: Optional[str], tone: str, length_level: int) -> str:
        s = self.settings
        return build_system_instruction(
            custom_prompt,
            tone,
            length_level,
            default=s.default_instruction,
            tones=s.tones,
            lengths=s.lengths,
        )

    async def complete(
        self,
        session: Session,
        message: str,
        custom_prompt: Optional[str] = None,
        tone: str = "professional",
        length_level: int = 3,
        temperature: Any = 0.5,
    ) -> CompletionResult:
        # Validate everything before spending quota
        instruction = self.system_instruction(custom_prompt, tone, length_level)
        config = generation_config(
            parse_temperature(temperature),
            length_level,
            tokens_per_level=self.settings.tokens_per_level,
            top_p=self.settings.top_p,
            top_k=self.settings.top_k,
        )

        logger.info(
            "chat: session=%s model=%s tone=%s length=%s max_tokens=%s",
            session.session_id,
            session.model,
            tone,
            length_level,
            config["maxOutputTokens"],
        )

        resp = await self.provider.generate_content(
            session.api_key,
            session.model,
            message,
            system_instruction=instruction,
            generation_config=config,
        )
        return CompletionResult(text=resp.text(), model=session.model)
