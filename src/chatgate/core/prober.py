# src/chatgate/core/prober.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from chatgate.adapters.base import TextProvider
from chatgate.core.errors import ProviderError
from chatgate.core.logging import mask_key

logger = logging.getLogger(__name__)


class ModelProber:
    """
    Find the first model in `candidates` that answers for an API key.

    Candidates are tried strictly in order with one synthetic call each;
    the first success short-circuits. Every attempt, failed or not, costs
    provider quota on the caller's key.
    """

    def __init__(self, provider: TextProvider, candidates: Sequence[str], prompt: str = "Test") -> None:
        if not candidates:
            raise ValueError("ModelProber needs at least one candidate model")
        self.provider = provider
        self.candidates: List[str] = list(candidates)
        self.prompt = prompt

    async def probe(self, api_key: str) -> Optional[str]:
        for model in self.candidates:
            try:
                await self.provider.generate_content(api_key, model, self.prompt)
            except ProviderError as ex:
                logger.warning("probe: model %s failed: %s", model, ex.message)
                continue
            except Exception as ex:
                # str(), never repr(): a UnicodeEncodeError repr contains the key
                logger.warning("probe: model %s failed: %s: %s", model, type(ex).__name__, ex)
                continue
            logger.info("probe: key=%s answered by %s", mask_key(api_key), model)
            return model

        logger.warning("probe: no working model for key=%s", mask_key(api_key))
        return None
