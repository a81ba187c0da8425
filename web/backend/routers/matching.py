#!/usr/bin/env python3
"""
Programme matching endpoints - run matching, manual overrides, dashboard views.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig
from database.models import STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED, STATUS_AUTO_REJECTED
from ..config import get_matching_config
from ..dependencies import get_db
from ..models.requests import ManualMatchRequest
from ..models.responses import (
    InitiateMatchingResponse,
    MatchResponse,
    MatchesResponse,
    UnmatchedMenteesResponse,
    StatisticsResponse,
    MenteeStatusResponse,
    MentorMenteesResponse,
    SweepResponse,
)
from ..services.matching_service import MatchingApiService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matching", tags=["matching"])

VALID_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED, STATUS_AUTO_REJECTED)


def get_service(
    db: Session = Depends(get_db),
    config: MatchingConfig = Depends(get_matching_config)
) -> MatchingApiService:
    return MatchingApiService(db, config)


@router.post("/sweep", response_model=SweepResponse)
def sweep_expired(
    program_id: Optional[str] = Query(default=None, description="Restrict the sweep to one programme"),
    service: MatchingApiService = Depends(get_service)
):
    """Auto-reject pending matches whose acceptance window has passed."""
    return service.sweep(program_id)


@router.post("/{program_id}/initiate", response_model=InitiateMatchingResponse)
def initiate_matching(
    program_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """
    Run the three-pass assignment for every approved, unmatched mentee.

    Only allowed after both registration periods have closed and before
    the matching deadline.
    """
    return service.initiate(program_id)


@router.post("/{program_id}/manual", response_model=MatchResponse)
def create_manual_match(
    program_id: str,
    request: ManualMatchRequest,
    service: MatchingApiService = Depends(get_service)
):
    """Pair a mentee with a hand-picked mentor."""
    return service.manual_match(program_id, request.mentee_id, request.mentor_id, request.matched_by)


@router.get("/{program_id}/matches", response_model=MatchesResponse)
def get_matches(
    program_id: str,
    status: Optional[str] = Query(default=None, description="Filter by match status"),
    service: MatchingApiService = Depends(get_service)
):
    """All matches of a programme with mentor and mentee details, newest first."""
    if status is not None and status not in VALID_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status: {status}. Must be one of {', '.join(VALID_STATUSES)}"
        )
    return service.get_matches(program_id, status)


@router.get("/{program_id}/unmatched", response_model=UnmatchedMenteesResponse)
def get_unmatched_mentees(
    program_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """Approved mentees that still need a mentor."""
    return service.get_unmatched(program_id)


@router.get("/{program_id}/statistics", response_model=StatisticsResponse)
def get_statistics(
    program_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """Summary counts for the matching dashboard."""
    return service.get_statistics(program_id)


@router.get("/{program_id}/mentees/{mentee_id}/status", response_model=MenteeStatusResponse)
def get_mentee_status(
    program_id: str,
    mentee_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """Current match and match history of one mentee."""
    return service.get_mentee_status(program_id, mentee_id)


@router.get("/{program_id}/mentors/{mentor_user_id}/mentees", response_model=MentorMenteesResponse)
def get_mentor_mentees(
    program_id: str,
    mentor_user_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """Pending and accepted mentees of one mentor, newest first."""
    return service.get_mentor_mentees(program_id, mentor_user_id)
