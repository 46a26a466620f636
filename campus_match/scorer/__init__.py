#!/usr/bin/env python3
"""
Scoring Module - Resume-to-job match scoring.

Public API:
- ScoringEngine: Computes a MatchResult for a (resume, job) pair
- ParsedResume, JobRequirement: Scoring inputs
- MatchResult, SkillMatch: Scoring output

Modules:
- models.py: Data structures (inputs and MatchResult)
- skills.py: Required-skill matching and base score
- bonus.py: Education/experience/certification/recent-graduate bonuses
- engine.py: ScoringEngine orchestrator
"""

from campus_match.scorer.models import (
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    JobRequirement,
    JobType,
    MatchResult,
    ParsedResume,
    RequiredSkill,
    SkillEntry,
    SkillMatch,
)
from campus_match.scorer.engine import ScoringEngine

__all__ = [
    'ScoringEngine',
    'ParsedResume',
    'SkillEntry',
    'EducationEntry',
    'ExperienceEntry',
    'CertificationEntry',
    'JobRequirement',
    'JobType',
    'RequiredSkill',
    'MatchResult',
    'SkillMatch',
]
