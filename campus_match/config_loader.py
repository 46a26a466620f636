import yaml
import os
from typing import List, Optional
from pydantic import BaseModel, Field


class ScorerConfig(BaseModel):
    """
    Configuration for the ScoringEngine.

    Bonus amounts are additive and independent of each other.
    """
    # Education bonus
    education_bonus: float = 5.0
    education_keywords: List[str] = Field(
        default_factory=lambda: ["computer", "engineering", "technology"]
    )

    # Experience bonus: per qualifying entry, capped
    experience_bonus_per_entry: float = 3.0
    experience_bonus_cap: float = 10.0
    experience_keywords: List[str] = Field(
        default_factory=lambda: ["developer", "engineer", "intern"]
    )

    # Certification bonus: per certification, capped
    certification_bonus_per_entry: float = 2.0
    certification_bonus_cap: float = 5.0

    # Recent graduate bonus (internships only)
    recent_grad_bonus: float = 5.0
    recent_grad_window_years: float = 2.0


class CacheConfig(BaseModel):
    """
    Configuration for the score and parsed-resume caches.

    A missing redis_url selects the in-process backend.
    """
    redis_url: Optional[str] = None
    password: Optional[str] = None
    socket_timeout_seconds: float = 2.0
    connect_timeout_seconds: float = 2.0

    score_ttl_seconds: int = 3600  # 1 hour
    score_key_prefix: str = "scores"

    resume_ttl_seconds: int = 86400  # 24 hours
    resume_key_prefix: str = "resume"

    # Startup connectivity check, then periodic rechecks while Redis is down
    connect_attempts: int = 3
    connect_wait_seconds: float = 1.0
    recheck_interval_seconds: float = 30.0


class ScreeningConfig(BaseModel):
    """Caller-side policy for scoring many candidates against one job."""
    max_concurrency: int = Field(default=8, ge=1)
    top_k: Optional[int] = Field(default=None, ge=1)  # None = return every candidate above threshold


class AppConfig(BaseModel):
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    screening: ScreeningConfig = Field(default_factory=ScreeningConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from a subdirectory), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    # Allow env var override for Redis connection
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        if not data.get('cache'):
            data['cache'] = {}
        data['cache']['redis_url'] = env_redis_url

    env_redis_password = os.environ.get("REDIS_PASSWORD")
    if env_redis_password:
        if not data.get('cache'):
            data['cache'] = {}
        data['cache']['password'] = env_redis_password

    # Allow env var override for score TTL
    env_score_ttl = os.environ.get("SCORE_CACHE_TTL_SECONDS")
    if env_score_ttl:
        if not data.get('cache'):
            data['cache'] = {}
        data['cache']['score_ttl_seconds'] = int(env_score_ttl)

    return AppConfig(**data)
