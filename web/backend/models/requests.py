#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ManualMatchRequest(BaseModel):
    """Request to pair a mentee with a hand-picked mentor."""
    mentee_id: str = Field(..., description="Mentee registration id or user id")
    mentor_id: str = Field(..., description="Mentor user id or registration id")
    matched_by: Optional[str] = Field(None, description="Operator user id")


class RespondRequest(BaseModel):
    """Mentor response to a pending match."""
    action: str = Field(..., description="'accept' or 'reject'")
    reason: Optional[str] = Field(
        None,
        description="Rejection reason, required when rejecting (min 10 characters)"
    )
