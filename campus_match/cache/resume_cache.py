"""Parsed Resume Cache - Caches parser output to avoid re-parsing."""
import json
import logging
from typing import Any, Dict, Optional

from campus_match.cache.backend import CacheBackend

logger = logging.getLogger(__name__)

# 24 hours in seconds
RESUME_TTL_SECONDS = 24 * 60 * 60


class ParsedResumeCache:
    """
    Caches the raw parsed-resume document per resume id.

    Stores the document as handed over by the parser, so callers can
    rebuild a ParsedResume (or anything else) from it.
    """

    def __init__(
        self,
        backend: CacheBackend,
        ttl_seconds: int = RESUME_TTL_SECONDS,
        key_prefix: str = "resume"
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _make_key(self, resume_id: Any) -> str:
        resume_id = str(resume_id) if resume_id is not None else ""
        if not resume_id:
            raise ValueError("resume_id is required")
        return f"{self.key_prefix}:{resume_id}"

    def get(self, resume_id: Any) -> Optional[Dict[str, Any]]:
        """Get cached parsed data, or None."""
        key = self._make_key(resume_id)
        try:
            data = self.backend.get(key)
            if data:
                logger.debug(f"Cache hit for {key}")
                return json.loads(data)
            logger.debug(f"Cache miss for {key}")
            return None
        except Exception as e:
            logger.warning(f"Error reading from resume cache: {e}")
            return None

    def set(self, resume_id: Any, parsed_data: Dict[str, Any], ttl_seconds: Optional[int] = None) -> bool:
        """Cache parsed data with TTL. Dates are stored as ISO strings."""
        key = self._make_key(resume_id)
        ttl = ttl_seconds or self.ttl_seconds
        try:
            self.backend.set_with_ttl(key, json.dumps(parsed_data, default=str), ttl)
            logger.debug(f"Cached {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.warning(f"Error writing to resume cache: {e}")
            return False

    def delete(self, resume_id: Any) -> bool:
        """Remove parsed data from cache."""
        key = self._make_key(resume_id)
        try:
            self.backend.delete(key)
            logger.debug(f"Deleted {key} from resume cache")
            return True
        except Exception as e:
            logger.warning(f"Error deleting from resume cache: {e}")
            return False
