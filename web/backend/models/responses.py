#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict


class MatchSummary(BaseModel):
    """A mentor/mentee match."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "match_id": "550e8400-e29b-41d4-a716-446655440000",
                "program_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "mentor_id": "9b2f4c1e-3a55-4c0f-9a0e-3f1c2b7d8e01",
                "mentee_id": "1f0e2d3c-4b5a-6978-8695-a4b3c2d1e0f9",
                "status": "pending_mentor_acceptance",
                "match_type": "preferred",
                "match_score": 86.0,
                "score_breakdown": {
                    "industry": 100.0,
                    "programme": 80.0,
                    "skills": 50.0,
                    "preference": 100.0
                },
                "preferred_choice_order": 1,
                "matched_at": "2026-03-01T09:00:00+00:00",
                "auto_reject_at": "2026-03-04T09:00:00+00:00"
            }
        }
    )

    match_id: str
    program_id: str
    mentor_id: str
    mentee_id: str
    mentor_registration_id: str
    mentee_registration_id: str
    status: str
    match_type: str
    match_score: Optional[float] = Field(None, ge=0, le=100)
    score_breakdown: Dict[str, float] = Field(default_factory=dict)
    preferred_choice_order: Optional[int] = None
    matched_by: Optional[str] = None
    matched_at: Optional[str] = None
    auto_reject_at: Optional[str] = None
    responded_at: Optional[str] = None
    rejection_reason: Optional[str] = None


class MatchListItem(MatchSummary):
    """Match with mentor and mentee display data."""
    program_name: Optional[str] = None
    mentor_name: str = ""
    mentor_email: Optional[str] = None
    mentee_name: str = ""
    mentee_email: Optional[str] = None


class MentorRequestItem(MatchListItem):
    """Pending request as shown to the mentor."""
    days_remaining: int = Field(ge=0)


class MenteeSummary(BaseModel):
    """An approved mentee registration."""
    registration_id: str
    mentee_id: str
    user_id: Optional[str] = None
    name: str = ""
    email: Optional[str] = None
    status: str
    areas_of_mentoring: List[str] = Field(default_factory=list)
    preferred_mentors: List[str] = Field(default_factory=list)


class MentorMenteeItem(MatchSummary):
    """A pending or accepted mentee as shown to their mentor."""
    program_name: Optional[str] = None
    mentee: Optional[MenteeSummary] = None


class InitiateMatchingResponse(BaseModel):
    """Result of a matching run."""
    success: bool = True
    program_id: str
    created_count: int
    preferred_count: int
    algorithm_count: int
    unmatched_count: int
    total_mentees: int
    skipped: int
    matches: List[MatchSummary]
    unmatched: List[MenteeSummary]


class MatchResponse(BaseModel):
    """A single created or updated match."""
    success: bool = True
    message: str
    match: MatchSummary


class MatchesResponse(BaseModel):
    """List of matches."""
    success: bool = True
    count: int
    matches: List[MatchListItem]


class UnmatchedMenteesResponse(BaseModel):
    """Approved mentees without a pending or accepted match."""
    success: bool = True
    count: int
    mentees: List[MenteeSummary]


class StatisticsData(BaseModel):
    """Dashboard summary counts for a programme."""
    total: int
    accepted: int
    pending: int
    rejected: int
    auto_rejected: int
    rejected_total: int
    total_mentees: int
    matched_mentees: int
    unmatched_mentees: int
    average_score: float
    preferred_matches: int
    algorithm_matches: int
    manual_matches: int


class StatisticsResponse(BaseModel):
    """Statistics response."""
    success: bool = True
    program_id: str
    statistics: StatisticsData


class MenteeStatusResponse(BaseModel):
    """Current match and history for one mentee."""
    success: bool = True
    registration_id: str
    registration_status: str
    current_match: Optional[MatchSummary] = None
    history: List[MatchSummary]


class MentorRequestsResponse(BaseModel):
    """Pending requests for a mentor."""
    success: bool = True
    count: int
    requests: List[MentorRequestItem]


class SweepResponse(BaseModel):
    """Result of an auto-reject sweep."""
    success: bool = True
    auto_rejected: int


class MentorMenteesResponse(BaseModel):
    """Mentees a mentor holds in a programme."""
    success: bool = True
    count: int
    mentees: List[MentorMenteeItem]
