#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring inputs and results.

Inputs are built from documents handed over by the resume parser and the
job CRUD layer. Missing or empty arrays are valid and become empty tuples;
a present-but-wrong-typed requiredSkills is a caller bug and raises.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from campus_match.utils import clamp, ensure_utc, parse_datetime

DEFAULT_SKILL_WEIGHT = 5
MIN_SKILL_WEIGHT = 1
MAX_SKILL_WEIGHT = 10
DEFAULT_SCORE_THRESHOLD = 60


def _get(doc: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    """Read a field by its document (camelCase) or Python (snake_case) name."""
    if camel in doc:
        return doc[camel]
    return doc.get(snake, default)


def _as_entries(value: Any) -> List[Any]:
    """Missing arrays are treated as empty."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"
    CONTRACT = "contract"

    @classmethod
    def parse(cls, value: Any) -> "JobType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.FULL_TIME


@dataclass(frozen=True)
class SkillEntry:
    name: str
    years_of_experience: int = 0

    @classmethod
    def from_dict(cls, doc: Any) -> Optional["SkillEntry"]:
        if isinstance(doc, str):
            return cls(name=doc)
        if not isinstance(doc, Mapping):
            return None
        years = _as_int(_get(doc, "yearsOfExperience", "years_of_experience", 0), 0)
        return cls(name=_as_text(doc.get("name")), years_of_experience=max(0, years))


@dataclass(frozen=True)
class EducationEntry:
    degree: str = ""
    graduation_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, doc: Any) -> Optional["EducationEntry"]:
        if not isinstance(doc, Mapping):
            return None
        return cls(
            degree=_as_text(doc.get("degree")),
            graduation_date=parse_datetime(_get(doc, "graduationDate", "graduation_date")),
        )


@dataclass(frozen=True)
class ExperienceEntry:
    title: str = ""

    @classmethod
    def from_dict(cls, doc: Any) -> Optional["ExperienceEntry"]:
        if not isinstance(doc, Mapping):
            return None
        return cls(title=_as_text(doc.get("title")))


@dataclass(frozen=True)
class CertificationEntry:
    name: str = ""

    @classmethod
    def from_dict(cls, doc: Any) -> Optional["CertificationEntry"]:
        if isinstance(doc, str):
            return cls(name=doc)
        if not isinstance(doc, Mapping):
            return None
        return cls(name=_as_text(doc.get("name")))


@dataclass(frozen=True)
class ParsedResume:
    """Snapshot of a parsed resume. Only the fields scoring reads."""
    skills: Tuple[SkillEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    experience: Tuple[ExperienceEntry, ...] = ()
    certifications: Tuple[CertificationEntry, ...] = ()

    @classmethod
    def from_dict(cls, doc: Optional[Mapping[str, Any]]) -> "ParsedResume":
        """Build from a parser document; accepts the `parsedData` wrapper too."""
        if not doc:
            return cls()
        if "parsedData" in doc and isinstance(doc["parsedData"], Mapping):
            doc = doc["parsedData"]

        def build(entry_cls, key):
            entries = (entry_cls.from_dict(e) for e in _as_entries(doc.get(key)))
            return tuple(e for e in entries if e is not None)

        return cls(
            skills=build(SkillEntry, "skills"),
            education=build(EducationEntry, "education"),
            experience=build(ExperienceEntry, "experience"),
            certifications=build(CertificationEntry, "certifications"),
        )


@dataclass(frozen=True)
class RequiredSkill:
    skill: str
    weight: int = DEFAULT_SKILL_WEIGHT

    @classmethod
    def from_dict(cls, doc: Any) -> Optional["RequiredSkill"]:
        if not isinstance(doc, Mapping):
            return None
        weight = _as_int(doc.get("weight", DEFAULT_SKILL_WEIGHT), DEFAULT_SKILL_WEIGHT)
        return cls(
            skill=_as_text(doc.get("skill")),
            weight=int(clamp(weight, MIN_SKILL_WEIGHT, MAX_SKILL_WEIGHT)),
        )


@dataclass(frozen=True)
class JobRequirement:
    required_skills: Tuple[RequiredSkill, ...] = ()
    job_type: JobType = JobType.FULL_TIME
    score_threshold: int = DEFAULT_SCORE_THRESHOLD

    @classmethod
    def from_dict(cls, doc: Optional[Mapping[str, Any]]) -> "JobRequirement":
        if not doc:
            return cls()

        raw_skills = _get(doc, "requiredSkills", "required_skills")
        if raw_skills is None:
            raw_skills = []
        if not isinstance(raw_skills, (list, tuple)):
            raise TypeError(
                f"requiredSkills must be a list, got {type(raw_skills).__name__}"
            )
        skills = (RequiredSkill.from_dict(s) for s in raw_skills)

        threshold = _as_int(
            _get(doc, "scoreThreshold", "score_threshold", DEFAULT_SCORE_THRESHOLD),
            DEFAULT_SCORE_THRESHOLD,
        )
        return cls(
            required_skills=tuple(s for s in skills if s is not None),
            job_type=JobType.parse(_get(doc, "jobType", "job_type", JobType.FULL_TIME)),
            score_threshold=int(clamp(threshold, 0, 100)),
        )


@dataclass(frozen=True)
class SkillMatch:
    skill: str
    matched: bool
    weight: int

    def to_dict(self) -> Dict[str, Any]:
        return {"skill": self.skill, "matched": self.matched, "weight": self.weight}


@dataclass(frozen=True)
class MatchResult:
    """Score for one (resume, job) pair. The pair itself is the cache key, not a field."""
    score: int
    skill_matches: Tuple[SkillMatch, ...] = field(default_factory=tuple)
    bonus_factors: float = 0.0
    calculated_at: Optional[datetime] = None

    @property
    def matched_skills(self) -> List[str]:
        return [m.skill for m in self.skill_matches if m.matched]

    @property
    def missing_skills(self) -> List[str]:
        return [m.skill for m in self.skill_matches if not m.matched]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "skill_matches": [m.to_dict() for m in self.skill_matches],
            "bonus_factors": self.bonus_factors,
            "calculated_at": self.calculated_at.isoformat() if self.calculated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchResult":
        calculated_at = data.get("calculated_at")
        return cls(
            score=int(data["score"]),
            skill_matches=tuple(
                SkillMatch(skill=m["skill"], matched=bool(m["matched"]), weight=int(m["weight"]))
                for m in data.get("skill_matches", [])
            ),
            bonus_factors=float(data.get("bonus_factors", 0.0)),
            calculated_at=ensure_utc(datetime.fromisoformat(calculated_at)) if calculated_at else None,
        )
