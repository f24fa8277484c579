from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml
from pydantic import BaseModel, Field


# --- Load gateway.yml once at startup into global CFG ------------------------

# This file lives at: src/chatgate/core/config.py
# gateway.yml sits next to the package root: src/chatgate/gateway.yml
PKG_DIR = Path(__file__).resolve().parents[1]
CFG_PATH = PKG_DIR / "gateway.yml"

with CFG_PATH.open("r", encoding="utf-8") as f:
    CFG: Dict[str, Any] = yaml.safe_load(f)


# --- Typed view over CFG + environment ---------------------------------------

class GatewaySettings(BaseModel):
    """
    Everything the app needs at runtime.

    Static data (models, tone/length sentences, generation knobs) comes from
    gateway.yml; process-level knobs (port, log level, timeouts, overrides)
    come from the environment.
    """
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    base_url: str
    timeout_s: float = Field(30.0, gt=0)
    model_candidates: List[str]
    probe_prompt: str = "Test"

    default_instruction: str
    tones: Dict[str, str]
    lengths: Dict[int, str]

    tokens_per_level: int = 200
    top_p: float = 0.8
    top_k: int = 40

    default_session_id: str = "default"
    default_tone: str = "professional"
    default_length: int = 3
    default_temperature: float = 0.5

    cors_origins: List[str] = ["*"]
    static_dir: str = "public"


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_settings(
    cfg: Dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> GatewaySettings:
    """
    Merge gateway.yml with environment overrides.

    Recognised env vars: HOST, PORT, LOG_LEVEL, GEMINI_BASE_URL,
    GEMINI_TIMEOUT_S, GEMINI_MODEL_CANDIDATES (comma list), CORS_ORIGINS
    (comma list), STATIC_DIR.
    """
    if cfg is None:
        cfg = CFG
    if environ is None:
        environ = os.environ

    provider = cfg.get("provider", {})
    instructions = cfg.get("instructions", {})
    generation = cfg.get("generation", {})
    defaults = cfg.get("defaults", {})

    candidates = _split_csv(environ.get("GEMINI_MODEL_CANDIDATES")) or list(cfg.get("models", []))
    if not candidates:
        raise RuntimeError("No model candidates configured in gateway.yml")

    return GatewaySettings(
        host=environ.get("HOST", "0.0.0.0"),
        port=int(environ.get("PORT", "3000")),
        log_level=(environ.get("LOG_LEVEL", "INFO") or "INFO").strip().upper(),
        base_url=environ.get("GEMINI_BASE_URL") or provider.get("base_url", ""),
        timeout_s=float(environ.get("GEMINI_TIMEOUT_S") or provider.get("timeout_s", 30)),
        model_candidates=candidates,
        probe_prompt=cfg.get("probe_prompt", "Test"),
        default_instruction=instructions.get("default", "You are a helpful assistant."),
        tones=dict(instructions.get("tones", {})),
        lengths={int(k): v for k, v in (instructions.get("lengths") or {}).items()},
        tokens_per_level=int(generation.get("tokens_per_level", 200)),
        top_p=float(generation.get("top_p", 0.8)),
        top_k=int(generation.get("top_k", 40)),
        default_session_id=defaults.get("session_id", "default"),
        default_tone=defaults.get("tone", "professional"),
        default_length=int(defaults.get("length", 3)),
        default_temperature=float(defaults.get("temperature", 0.5)),
        cors_origins=_split_csv(environ.get("CORS_ORIGINS")) or ["*"],
        static_dir=environ.get("STATIC_DIR", "public"),
    )
