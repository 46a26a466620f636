"""Cache Module - Caching services."""
from campus_match.cache.backend import (
    CacheBackend,
    InMemoryCacheBackend,
    RedisCacheBackend
)
from campus_match.cache.resume_cache import ParsedResumeCache, RESUME_TTL_SECONDS
from campus_match.cache.score_cache import ScoreCache, SCORE_TTL_SECONDS

__all__ = [
    'CacheBackend',
    'InMemoryCacheBackend',
    'RedisCacheBackend',
    'ScoreCache',
    'ParsedResumeCache',
    'SCORE_TTL_SECONDS',
    'RESUME_TTL_SECONDS'
]
