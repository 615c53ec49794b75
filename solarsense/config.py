import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

DEFAULT_ADVICE_MODEL = "meta-llama/Llama-3.1-8B-Instruct"
DEFAULT_ADVICE_MAX_TOKENS = 1500

@dataclass(frozen=True)
class Settings:
    hf_token: Optional[str]
    advice_model: str
    advice_max_tokens: int

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("{}={!r} is not an integer, using {}", name, raw, default)
        return default
    if value <= 0:
        logger.warning("{}={} must be positive, using {}", name, value, default)
        return default
    return value

def get_settings() -> Settings:
    # Read on every call so a rotated token in .env/env is picked up
    return Settings(
        hf_token=os.getenv("HF_TOKEN") or None,
        advice_model=os.getenv("SOLARSENSE_ADVICE_MODEL") or DEFAULT_ADVICE_MODEL,
        advice_max_tokens=_int_env("SOLARSENSE_ADVICE_MAX_TOKENS", DEFAULT_ADVICE_MAX_TOKENS),
    )
