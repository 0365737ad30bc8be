"""Configuration management."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application configuration, read once from the environment."""

    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-5-haiku-latest"
    recommendation_max_tokens: int = 1000

    # TPL Symphony Web Services
    tpl_base_url: str = "https://catalog.torontopubliclibrary.ca"
    tpl_timeout: float = 8.0
    tpl_live_search: bool = True

    # Demo availability for fallback records; unset means a fresh draw per request
    fallback_seed: int | None = None

    allowed_origins: tuple[str, ...] = ("http://localhost:3000", "http://localhost:8000")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        seed = os.getenv("FALLBACK_SEED")
        origins = os.getenv("ALLOWED_ORIGINS", ",".join(cls.allowed_origins))
        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", cls.anthropic_model),
            recommendation_max_tokens=int(os.getenv("RECOMMENDATION_MAX_TOKENS", str(cls.recommendation_max_tokens))),
            tpl_base_url=os.getenv("TPL_BASE_URL", cls.tpl_base_url).rstrip("/"),
            tpl_timeout=float(os.getenv("TPL_TIMEOUT", str(cls.tpl_timeout))),
            tpl_live_search=_env_bool("TPL_LIVE_SEARCH", cls.tpl_live_search),
            fallback_seed=int(seed) if seed and seed.strip() else None,
            allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
