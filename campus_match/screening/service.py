#!/usr/bin/env python3
"""
Candidate Screening Service - Scores many candidates against one job.

Scores go through ScoreCache, so repeat listings within the TTL are served
from the cache. Lookups fan out over a bounded thread pool.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
import logging

from campus_match.cache.score_cache import ScoreCache
from campus_match.config_loader import ScreeningConfig
from campus_match.scorer import JobRequirement, MatchResult, ParsedResume

logger = logging.getLogger(__name__)

ResumeInput = Union[ParsedResume, Mapping[str, Any]]
JobInput = Union[JobRequirement, Mapping[str, Any]]


@dataclass(frozen=True)
class ScreenedCandidate:
    """A candidate whose score met the job's threshold."""
    resume_id: str
    result: MatchResult

    @property
    def score(self) -> int:
        return self.result.score


@dataclass(frozen=True)
class ScoreSummary:
    """One row of a student's score dashboard."""
    job_id: str
    score: int
    meets_threshold: bool
    calculated_at: Optional[datetime]


class CandidateScreeningService:
    """
    Caller-side policy around ScoreCache.

    - screen_candidates: recruiter view, candidates at or above threshold
    - summarize_scores: student view, every job with its threshold verdict
    """

    def __init__(
        self,
        score_cache: ScoreCache,
        config: Optional[ScreeningConfig] = None
    ):
        self.score_cache = score_cache
        self.config = config or ScreeningConfig()

    def _fan_out(self, fn, items: List[Any]) -> List[Any]:
        if not items:
            return []
        workers = min(self.config.max_concurrency, len(items))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(fn, items))

    def screen_candidates(
        self,
        job_id: Any,
        job: JobInput,
        candidates: Iterable[Tuple[Any, ResumeInput]],
        now: Optional[datetime] = None
    ) -> List[ScreenedCandidate]:
        """Score candidates for a job and keep those meeting its threshold.

        Args:
            job_id: Identifier of the job
            job: Job requirement (its score_threshold is the cut-off)
            candidates: (resume_id, parsed resume) pairs
            now: Current time used for any score computed on a miss

        Returns:
            Candidates with score >= threshold, highest score first,
            truncated to config.top_k if set
        """
        if isinstance(job, Mapping):
            job = JobRequirement.from_dict(job)
        candidates = list(candidates)

        def score(candidate):
            resume_id, resume = candidate
            return ScreenedCandidate(
                resume_id=str(resume_id),
                result=self.score_cache.get_or_compute(resume_id, job_id, resume, job, now=now)
            )

        scored = self._fan_out(score, candidates)

        passing = [c for c in scored if c.score >= job.score_threshold]
        passing.sort(key=lambda c: c.score, reverse=True)

        if self.config.top_k is not None:
            passing = passing[:self.config.top_k]

        logger.info(
            f"Screened {len(candidates)} candidates for job {job_id}: "
            f"{len(passing)} at or above threshold {job.score_threshold}"
        )
        return passing

    def summarize_scores(
        self,
        resume_id: Any,
        resume: ResumeInput,
        jobs: Iterable[Tuple[Any, JobInput]],
        now: Optional[datetime] = None
    ) -> List[ScoreSummary]:
        """Score one resume against several jobs, in the given job order."""
        if isinstance(resume, Mapping):
            resume = ParsedResume.from_dict(resume)

        def summarize(entry):
            job_id, job = entry
            if isinstance(job, Mapping):
                job = JobRequirement.from_dict(job)
            result = self.score_cache.get_or_compute(resume_id, job_id, resume, job, now=now)
            return ScoreSummary(
                job_id=str(job_id),
                score=result.score,
                meets_threshold=result.score >= job.score_threshold,
                calculated_at=result.calculated_at
            )

        return self._fan_out(summarize, list(jobs))
