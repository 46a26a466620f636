#!/usr/bin/env python3
"""
Skill Matching - Required-skill coverage against resume skills.

Matching is textual: a required skill is covered when it and any resume
skill are substrings of one another after normalization. "js" therefore
covers "javascript" and "c" covers "c++".
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from campus_match.scorer.models import RequiredSkill, SkillEntry, SkillMatch

WEIGHT_SCALE = 10


def normalize_skill(name: Optional[str]) -> str:
    """Lowercase and trim a skill name."""
    if not name:
        return ""
    return name.lower().strip()


def skills_overlap(resume_skill: str, required_skill: str) -> bool:
    """Substring containment in either direction. Blank names never match."""
    if not resume_skill or not required_skill:
        return False
    return resume_skill in required_skill or required_skill in resume_skill


def match_required_skills(
    resume_skills: Iterable[SkillEntry],
    required_skills: Iterable[RequiredSkill]
) -> Tuple[List[SkillMatch], float, float]:
    """
    Match every required skill against the resume, in job order.

    Returns: (skill_matches, total_score, total_weight)
    """
    normalized: Sequence[str] = [normalize_skill(s.name) for s in resume_skills]

    skill_matches = []
    total_score = 0.0
    total_weight = 0.0

    for required in required_skills:
        name = normalize_skill(required.skill)
        matched = any(skills_overlap(rs, name) for rs in normalized)

        skill_matches.append(SkillMatch(skill=required.skill, matched=matched, weight=required.weight))

        total_weight += required.weight * WEIGHT_SCALE
        if matched:
            total_score += required.weight * WEIGHT_SCALE

    return skill_matches, total_score, total_weight


def calculate_base_score(total_score: float, total_weight: float) -> float:
    """
    Weighted share of required skills covered, as a percentage.

    A job with no required skills scores 0, not 100.
    """
    if total_weight <= 0:
        return 0.0
    return (total_score / total_weight) * 100
