#!/usr/bin/env python3
"""
Bonus Calculations - Qualitative adjustments added to the base score.

Includes bonuses from:
- Relevant degree (education)
- Developer/engineer/intern roles (experience, capped)
- Certifications (capped)
- Recent graduation (internships only)

Each factor is independent. A missing or malformed field contributes
nothing; no factor raises.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

from campus_match.config_loader import ScorerConfig
from campus_match.scorer.models import JobRequirement, JobType, ParsedResume
from campus_match.utils import ensure_utc, parse_datetime

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


def _contains_any(text: Optional[str], keywords: List[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(k.lower() in lowered for k in keywords)


def education_bonus(resume: ParsedResume, config: ScorerConfig) -> float:
    if any(_contains_any(edu.degree, config.education_keywords) for edu in resume.education):
        return config.education_bonus
    return 0.0


def experience_bonus(resume: ParsedResume, config: ScorerConfig) -> float:
    count = sum(1 for exp in resume.experience if _contains_any(exp.title, config.experience_keywords))
    return min(config.experience_bonus_cap, count * config.experience_bonus_per_entry)


def certification_bonus(resume: ParsedResume, config: ScorerConfig) -> float:
    count = len(resume.certifications)
    return min(config.certification_bonus_cap, count * config.certification_bonus_per_entry)


def is_recent_graduate(resume: ParsedResume, now: datetime, config: ScorerConfig) -> bool:
    """
    True if any graduation date is no more than the window before `now`.

    Future graduation dates give a negative difference and also qualify.
    """
    window = timedelta(days=DAYS_PER_YEAR * config.recent_grad_window_years)
    now = ensure_utc(now)
    for edu in resume.education:
        graduated = parse_datetime(edu.graduation_date)
        if graduated is not None and (now - graduated) <= window:
            return True
    return False


def recent_grad_bonus(resume: ParsedResume, job: JobRequirement, now: datetime, config: ScorerConfig) -> float:
    if job.job_type != JobType.INTERNSHIP:
        return 0.0
    if is_recent_graduate(resume, now, config):
        return config.recent_grad_bonus
    return 0.0


def calculate_bonus_details(
    resume: ParsedResume,
    job: JobRequirement,
    now: datetime,
    config: ScorerConfig
) -> List[Dict[str, Any]]:
    """
    Calculate every bonus that applies, with a breakdown.

    Returns: list of {'type', 'amount', 'reason'} for non-zero bonuses
    """
    details = []

    amount = education_bonus(resume, config)
    if amount:
        details.append({
            'type': 'education',
            'amount': amount,
            'reason': "Degree in a relevant field",
        })

    amount = experience_bonus(resume, config)
    if amount:
        details.append({
            'type': 'experience',
            'amount': amount,
            'reason': "Relevant developer/engineer/intern experience",
        })

    amount = certification_bonus(resume, config)
    if amount:
        details.append({
            'type': 'certifications',
            'amount': amount,
            'reason': f"{len(resume.certifications)} certification(s)",
        })

    amount = recent_grad_bonus(resume, job, now, config)
    if amount:
        details.append({
            'type': 'recent_graduate',
            'amount': amount,
            'reason': "Recent graduate applying for an internship",
        })

    return details


def calculate_bonus_factors(
    resume: ParsedResume,
    job: JobRequirement,
    now: datetime,
    config: Optional[ScorerConfig] = None
) -> float:
    """Total bonus, unclamped."""
    details = calculate_bonus_details(resume, job, now, config or ScorerConfig())
    total = float(sum(d['amount'] for d in details))
    if details:
        logger.debug(f"Bonus {total:.1f} from {[d['type'] for d in details]}")
    return total
