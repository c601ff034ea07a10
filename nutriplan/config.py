from __future__ import annotations

import os
from typing import List


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Centralized configuration for the meal-suggestion backend."""

    def __init__(self) -> None:
        self.groq_api_key: str | None = os.environ.get("GROQ_API_KEY") or None
        self.groq_base_url: str = os.environ.get(
            "GROQ_BASE_URL", "https://api.groq.com/openai/v1"
        )
        self.groq_model: str = os.environ.get("GROQ_MODEL", "llama-3.1-8b-instant")
        self.groq_timeout: float = float(os.environ.get("GROQ_TIMEOUT", "30"))
        self.groq_temperature: float = float(os.environ.get("GROQ_TEMPERATURE", "0.7"))
        self.groq_max_tokens: int = int(os.environ.get("GROQ_MAX_TOKENS", "2048"))
        self.groq_top_p: float = float(os.environ.get("GROQ_TOP_P", "0.9"))

        # ---- Request governor ----
        self.ai_min_interval_s: float = float(
            os.environ.get("NUTRIPLAN_AI_MIN_INTERVAL", "3.0")
        )
        self.ai_failure_threshold: int = int(
            os.environ.get("NUTRIPLAN_AI_FAILURE_THRESHOLD", "2")
        )
        self.ai_circuit_reset_s: float = float(
            os.environ.get("NUTRIPLAN_AI_CIRCUIT_RESET", "60")
        )
        self.ai_rate_limit_delay_s: float = float(
            os.environ.get("NUTRIPLAN_AI_RATE_LIMIT_DELAY", "5.0")
        )
        self.ai_max_retries: int = int(os.environ.get("NUTRIPLAN_AI_MAX_RETRIES", "2"))
        self.ai_serialize: bool = _env_bool("NUTRIPLAN_AI_SERIALIZE", False)

        self.host: str = os.environ.get("NUTRIPLAN_HOST", "127.0.0.1")
        self.port: int = int(os.environ.get("NUTRIPLAN_PORT", "8000"))

        cors = os.environ.get("NUTRIPLAN_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
