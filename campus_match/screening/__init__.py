"""Screening Module - Candidate listing and score summaries over ScoreCache."""
from campus_match.screening.service import (
    CandidateScreeningService,
    ScreenedCandidate,
    ScoreSummary
)

__all__ = [
    'CandidateScreeningService',
    'ScreenedCandidate',
    'ScoreSummary'
]
