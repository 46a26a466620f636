import logging
from dataclasses import dataclass

from tenacity import RetryError, retry, stop_after_attempt, wait_fixed

from campus_match.cache import (
    CacheBackend,
    InMemoryCacheBackend,
    ParsedResumeCache,
    RedisCacheBackend,
    ScoreCache
)
from campus_match.config_loader import AppConfig, CacheConfig
from campus_match.scorer import ScoringEngine
from campus_match.screening import CandidateScreeningService
from campus_match.utils import sanitize_url

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The route layer builds one of these at startup and passes the services
    it needs into handlers. Nothing here is module-level state.
    """
    config: AppConfig
    cache_backend: CacheBackend
    scoring_engine: ScoringEngine
    score_cache: ScoreCache
    resume_cache: ParsedResumeCache
    screening_service: CandidateScreeningService

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        cache_backend = cls._build_cache_backend(config.cache)

        scoring_engine = ScoringEngine(config.scorer)

        score_cache = ScoreCache(
            backend=cache_backend,
            engine=scoring_engine,
            ttl_seconds=config.cache.score_ttl_seconds,
            key_prefix=config.cache.score_key_prefix
        )

        resume_cache = ParsedResumeCache(
            backend=cache_backend,
            ttl_seconds=config.cache.resume_ttl_seconds,
            key_prefix=config.cache.resume_key_prefix
        )

        screening_service = CandidateScreeningService(score_cache, config.screening)

        return cls(
            config=config,
            cache_backend=cache_backend,
            scoring_engine=scoring_engine,
            score_cache=score_cache,
            resume_cache=resume_cache,
            screening_service=screening_service
        )

    @staticmethod
    def _build_cache_backend(cache_config: CacheConfig) -> CacheBackend:
        """Build the cache backend, checking Redis connectivity if one is configured.

        An unreachable Redis does not stop startup: the backend is marked
        unavailable, reads miss without touching Redis, and scores are
        computed directly until a periodic recheck succeeds.
        """
        if not cache_config.redis_url:
            logger.info("No Redis URL configured, using in-process score cache")
            return InMemoryCacheBackend()

        backend = RedisCacheBackend(
            redis_url=cache_config.redis_url,
            password=cache_config.password,
            socket_timeout=cache_config.socket_timeout_seconds,
            connect_timeout=cache_config.connect_timeout_seconds,
            recheck_interval=cache_config.recheck_interval_seconds
        )

        @retry(
            stop=stop_after_attempt(cache_config.connect_attempts),
            wait=wait_fixed(cache_config.connect_wait_seconds)
        )
        def wait_for_cache():
            backend.ping()

        try:
            wait_for_cache()
            logger.info(f"Score cache connected to Redis at {sanitize_url(cache_config.redis_url)}")
        except RetryError as e:
            logger.warning(
                f"Score cache Redis unavailable after {cache_config.connect_attempts} attempts "
                f"({e.last_attempt.exception()}); computing scores directly until it recovers"
            )
            backend.mark_unavailable()

        return backend
