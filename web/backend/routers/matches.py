#!/usr/bin/env python3
"""
Match endpoints - mentor responses and pending requests.
"""

import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException

from ..models.requests import RespondRequest
from ..models.responses import MatchResponse, MentorRequestsResponse
from ..services.matching_service import MatchingApiService
from .matching import get_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


def validate_uuid(value: str, name: str) -> str:
    """Validate that an id path parameter is a valid UUID."""
    try:
        uuid.UUID(value)
        return value
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name} format: {value}. Must be a valid UUID."
        )


@router.post("/{match_id}/respond", response_model=MatchResponse)
def respond_to_match(
    match_id: str,
    request: RespondRequest,
    service: MatchingApiService = Depends(get_service)
):
    """
    Accept or reject a pending match.

    Rejecting requires a reason of at least 10 characters. Accepting after
    the acceptance deadline fails with 410.
    """
    validate_uuid(match_id, "match_id")
    return service.respond(match_id, request.action, request.reason)


@router.get("/mentor/{mentor_user_id}/requests", response_model=MentorRequestsResponse)
def get_mentor_requests(
    mentor_user_id: str,
    service: MatchingApiService = Depends(get_service)
):
    """Pending requests waiting for this mentor, with days left to answer."""
    validate_uuid(mentor_user_id, "mentor_user_id")
    return service.get_mentor_requests(mentor_user_id)
