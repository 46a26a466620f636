#!/usr/bin/env python3
"""
Scoring Engine - Deterministic resume-to-job match score.

score = clamp(base + bonus, 0, 100), rounded half-up, where base is the
weighted share of required skills covered by the resume.

The engine does no I/O. The current time is passed in (or read from an
injected clock) so that the recent-graduate bonus is reproducible.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union
import logging

from campus_match.config_loader import ScorerConfig
from campus_match.scorer import bonus, skills
from campus_match.scorer.models import JobRequirement, MatchResult, ParsedResume
from campus_match.utils import clamp, ensure_utc, round_half_up

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MIN_SCORE = 0
MAX_SCORE = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScoringEngine:
    """
    Computes a MatchResult for a parsed resume against a job's weighted skills.

    Accepts the dataclass models or raw documents (converted via from_dict).
    """

    def __init__(
        self,
        config: Optional[ScorerConfig] = None,
        clock: Optional[Clock] = None
    ):
        self.config = config or ScorerConfig()
        self.clock = clock or utc_now

    def compute_score(
        self,
        resume: Union[ParsedResume, Mapping[str, Any]],
        job: Union[JobRequirement, Mapping[str, Any]],
        now: Optional[datetime] = None
    ) -> MatchResult:
        """Calculate the match score for one resume and one job.

        Args:
            resume: Parsed resume (skills, education, experience, certifications)
            job: Job requirement (weighted required skills, job type)
            now: Current time; defaults to the engine's clock

        Returns:
            MatchResult with score, per-skill matches, raw bonus and timestamp
        """
        if isinstance(resume, Mapping):
            resume = ParsedResume.from_dict(resume)
        if isinstance(job, Mapping):
            job = JobRequirement.from_dict(job)
        now = ensure_utc(now if now is not None else self.clock())

        skill_matches, total_score, total_weight = skills.match_required_skills(
            resume.skills,
            job.required_skills
        )
        base_score = skills.calculate_base_score(total_score, total_weight)

        bonus_factors = bonus.calculate_bonus_factors(resume, job, now, self.config)

        score = round_half_up(clamp(base_score + bonus_factors, MIN_SCORE, MAX_SCORE))

        logger.debug(
            f"Scored {len(skill_matches)} required skills: "
            f"base={base_score:.2f}, bonus={bonus_factors:.1f}, final={score}"
        )

        return MatchResult(
            score=score,
            skill_matches=tuple(skill_matches),
            bonus_factors=bonus_factors,
            calculated_at=now
        )
