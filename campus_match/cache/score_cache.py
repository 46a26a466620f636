"""Score Cache - Caches match scores per (resume, job) pair."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from campus_match.cache.backend import CacheBackend
from campus_match.scorer import JobRequirement, MatchResult, ParsedResume, ScoringEngine

logger = logging.getLogger(__name__)

# 1 hour in seconds
SCORE_TTL_SECONDS = 60 * 60

KEY_SEPARATOR = ":"


def _validate_id(name: str, value: Any) -> str:
    value = str(value) if value is not None else ""
    if not value:
        raise ValueError(f"{name} is required")
    if KEY_SEPARATOR in value:
        raise ValueError(f"{name} must not contain '{KEY_SEPARATOR}': {value!r}")
    return value


class ScoreCache:
    """
    Read-through cache in front of ScoringEngine.

    Entries are keyed by scores:<resume_id>:<job_id> and expire a fixed
    time after they were written; reads never extend them. Backend failures
    degrade to a miss and are never raised to the caller.
    """

    def __init__(
        self,
        backend: CacheBackend,
        engine: Optional[ScoringEngine] = None,
        ttl_seconds: int = SCORE_TTL_SECONDS,
        key_prefix: str = "scores"
    ):
        self.backend = backend
        self.engine = engine or ScoringEngine()
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _make_key(self, resume_id: Any, job_id: Any) -> str:
        """Create cache key from the (resume, job) pair."""
        resume_id = _validate_id("resume_id", resume_id)
        job_id = _validate_id("job_id", job_id)
        return f"{self.key_prefix}:{resume_id}:{job_id}"

    def _resume_prefix(self, resume_id: Any) -> str:
        return f"{self.key_prefix}:{_validate_id('resume_id', resume_id)}:"

    def get(self, resume_id: Any, job_id: Any) -> Optional[MatchResult]:
        """Get cached score, or None on miss, expiry, backend error or corrupt entry."""
        key = self._make_key(resume_id, job_id)

        try:
            data = self.backend.get(key)
        except Exception as e:
            logger.warning(f"Error reading from score cache: {e}")
            return None

        if not data:
            logger.debug(f"Cache miss for {key}")
            return None

        try:
            cache_entry = json.loads(data)
            result = MatchResult.from_dict(cache_entry["data"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable score cache entry {key}: {e}")
            return None

        logger.debug(f"Cache hit for {key}")
        return result

    def set(self, resume_id: Any, job_id: Any, result: MatchResult) -> bool:
        """Cache a score with TTL. Returns False if the write failed."""
        key = self._make_key(resume_id, job_id)

        cache_entry = {
            "data": result.to_dict(),
            "cached_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": self.ttl_seconds
        }

        try:
            self.backend.set_with_ttl(key, json.dumps(cache_entry), self.ttl_seconds)
            logger.debug(f"Cached {key} (TTL: {self.ttl_seconds}s)")
            return True
        except Exception as e:
            logger.warning(f"Error writing to score cache: {e}")
            return False

    def get_or_compute(
        self,
        resume_id: Any,
        job_id: Any,
        resume: Union[ParsedResume, Mapping[str, Any]],
        job: Union[JobRequirement, Mapping[str, Any]],
        now: Optional[datetime] = None
    ) -> MatchResult:
        """Return the cached score for the pair, computing and storing it on a miss.

        Args:
            resume_id: Identifier of the resume (first half of the key)
            job_id: Identifier of the job (second half of the key)
            resume: Parsed resume to score on a miss
            job: Job requirement to score on a miss
            now: Current time passed to the engine on a miss

        Returns:
            MatchResult, either cached or freshly computed
        """
        cached = self.get(resume_id, job_id)
        if cached is not None:
            return cached

        computed = self.engine.compute_score(resume, job, now=now)
        self.set(resume_id, job_id, computed)
        return computed

    def invalidate(self, resume_id: Any, job_id: Optional[Any] = None) -> bool:
        """
        Remove cached scores.

        With job_id, removes that single entry. Without it, removes every
        job's score for the resume; call this when the resume is re-parsed.
        """
        if job_id is not None:
            key = self._make_key(resume_id, job_id)
        else:
            prefix = self._resume_prefix(resume_id)

        try:
            if job_id is not None:
                self.backend.delete(key)
                logger.debug(f"Deleted {key} from score cache")
            else:
                deleted = self.backend.delete_by_prefix(prefix)
                logger.info(f"Invalidated {deleted} cached scores for resume {resume_id}")
            return True
        except Exception as e:
            logger.warning(f"Error invalidating score cache: {e}")
            return False

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        try:
            return {
                "available": self.backend.is_available,
                "score_cache_keys": self.backend.count_by_prefix(f"{self.key_prefix}:"),
                "ttl_seconds": self.ttl_seconds,
                "ttl_human": f"{self.ttl_seconds // 60} minutes"
            }
        except Exception as e:
            logger.warning(f"Error getting cache stats: {e}")
            return {"available": False, "error": str(e)}
