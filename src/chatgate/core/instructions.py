# src/chatgate/core/instructions.py

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from chatgate.core.errors import ValidationError


def build_system_instruction(
    custom_prompt: Optional[str],
    tone: str,
    length_level: int,
    *,
    default: str,
    tones: Mapping[str, str],
    lengths: Mapping[int, str],
) -> str:
    """
    Assemble the system instruction sent with every chat call.

    Order is fixed: base prompt, then tone sentence, then length sentence,
    each joined by a single space. Unknown tones and out-of-range levels
    are rejected instead of being glued in as garbage.
    """
    if tone not in tones:
        raise ValidationError(
            f"Unknown tone '{tone}'. Expected one of: {', '.join(tones)}"
        )
    if length_level not in lengths:
        lo, hi = min(lengths), max(lengths)
        raise ValidationError(f"responseLength must be between {lo} and {hi}")

    base = custom_prompt or default
    return f"{base} {tones[tone]} {lengths[length_level]}"


def parse_temperature(raw: Any) -> float:
    # Strings like "0.7" are accepted, same as a JSON number.
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"temperature must be a number, got {raw!r}")


def generation_config(
    temperature: float,
    length_level: int,
    *,
    tokens_per_level: int = 200,
    top_p: float = 0.8,
    top_k: int = 40,
) -> Dict[str, Any]:
    """Gemini generationConfig for one chat call."""
    return {
        "temperature": temperature,
        "maxOutputTokens": length_level * tokens_per_level,
        "topP": top_p,
        "topK": top_k,
    }
