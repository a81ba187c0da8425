"""Data Transfer Objects for the matching engine.

The assignment passes work on these plain objects rather than ORM rows:
they carry only the scoring-relevant fields and stay valid after the
database session is closed.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from core.scorer.models import ScoreBreakdown


@dataclass
class MentorCandidate:
    """Approved mentor with the profile fields the scorer reads."""
    registration_id: str
    user_id: str
    capacity: int
    industry: Optional[str] = None
    company: Optional[str] = None
    programme: Optional[str] = None
    skills: List[str] = field(default_factory=list)


@dataclass
class MenteeCandidate:
    """Approved, currently unmatched mentee."""
    registration_id: str
    mentee_id: str
    industry: Optional[str] = None
    company: Optional[str] = None
    programme: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    preferred_mentors: List[str] = field(default_factory=list)


@dataclass
class PlannedMatch:
    """One pairing decided by the engine, not yet persisted."""
    mentee: MenteeCandidate
    mentor: MentorCandidate
    match_type: str
    score: ScoreBreakdown
    preferred_choice_order: Optional[int] = None


@dataclass
class AssignmentPlan:
    matches: List[PlannedMatch] = field(default_factory=list)
    unmatched: List[MenteeCandidate] = field(default_factory=list)

    @property
    def preferred_count(self) -> int:
        return sum(1 for m in self.matches if m.match_type == 'preferred')

    @property
    def algorithm_count(self) -> int:
        return sum(1 for m in self.matches if m.match_type == 'algorithm')
