# src/chatgate/adapters/base.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from chatgate.adapters.gemini import GeminiResponse


class TextProvider(Protocol):
    """What the prober and the gateway need from a provider client."""

    async def generate_content(
        self,
        api_key: str,
        model: str,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> GeminiResponse:
        ...
