#!/usr/bin/env python3
"""
Matching API service - maps matching operations onto response models.
"""

import logging
from dataclasses import asdict
from typing import Optional

from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig
from core.matcher import (
    MatchingService,
    MatchLifecycleService,
    StatisticsReporter,
    MatchListing,
    MentorRequest,
    MentorMentee,
)
from database.models import MentorMenteeMatch, MenteeRegistration
from ..models.responses import (
    MatchSummary,
    MatchListItem,
    MentorRequestItem,
    MentorMenteeItem,
    MenteeSummary,
    InitiateMatchingResponse,
    MatchResponse,
    MatchesResponse,
    UnmatchedMenteesResponse,
    StatisticsData,
    StatisticsResponse,
    MenteeStatusResponse,
    MentorRequestsResponse,
    MentorMenteesResponse,
    SweepResponse,
)
from ..utils import safe_float, safe_str, safe_datetime_iso

logger = logging.getLogger(__name__)


class MatchingApiService:
    """Service behind the /api/matching and /api/matches routes."""

    def __init__(self, db: Session, config: MatchingConfig):
        self.db = db
        self.config = config
        self.matching = MatchingService(db, config)
        self.lifecycle = MatchLifecycleService(db, config)
        self.reporter = StatisticsReporter(db)

    def initiate(self, program_id: str) -> InitiateMatchingResponse:
        result = self.matching.run_matching(program_id)
        return InitiateMatchingResponse(
            success=True,
            program_id=result.program_id,
            created_count=len(result.created),
            preferred_count=sum(1 for m in result.created if m.match_type == 'preferred'),
            algorithm_count=sum(1 for m in result.created if m.match_type == 'algorithm'),
            unmatched_count=len(result.unmatched),
            total_mentees=result.total_mentees,
            skipped=result.skipped,
            matches=[self._to_match_summary(m) for m in result.created],
            unmatched=[self._to_mentee_summary(r) for r in result.unmatched],
        )

    def manual_match(
        self,
        program_id: str,
        mentee_id: str,
        mentor_id: str,
        matched_by: Optional[str] = None
    ) -> MatchResponse:
        match = self.matching.create_manual_match(program_id, mentee_id, mentor_id, matched_by=matched_by)
        return MatchResponse(
            success=True,
            message="Manual match created",
            match=self._to_match_summary(match)
        )

    def get_matches(self, program_id: str, status: Optional[str] = None) -> MatchesResponse:
        # Listing shows settled state, so expired requests are flipped first
        self.lifecycle.sweep_expired_matches(program_id=program_id)
        listings = self.reporter.list_matches(program_id, status=status)
        return MatchesResponse(
            success=True,
            count=len(listings),
            matches=[self._to_match_list_item(listing) for listing in listings]
        )

    def get_unmatched(self, program_id: str) -> UnmatchedMenteesResponse:
        self.lifecycle.sweep_expired_matches(program_id=program_id)
        mentees = self.reporter.list_unmatched_mentees(program_id)
        return UnmatchedMenteesResponse(
            success=True,
            count=len(mentees),
            mentees=[self._to_mentee_summary(r) for r in mentees]
        )

    def get_statistics(self, program_id: str) -> StatisticsResponse:
        self.lifecycle.sweep_expired_matches(program_id=program_id)
        stats = self.reporter.get_statistics(program_id)
        return StatisticsResponse(
            success=True,
            program_id=program_id,
            statistics=StatisticsData(**asdict(stats))
        )

    def get_mentee_status(self, program_id: str, mentee_id: str) -> MenteeStatusResponse:
        status = self.lifecycle.get_mentee_status(program_id, mentee_id)
        return MenteeStatusResponse(
            success=True,
            registration_id=status.registration_id,
            registration_status=status.registration_status,
            current_match=self._to_match_summary(status.current_match) if status.current_match else None,
            history=[self._to_match_summary(m) for m in status.history]
        )

    def sweep(self, program_id: Optional[str] = None) -> SweepResponse:
        return SweepResponse(
            success=True,
            auto_rejected=self.lifecycle.sweep_expired_matches(program_id=program_id)
        )

    def respond(self, match_id: str, action: str, reason: Optional[str] = None) -> MatchResponse:
        match = self.lifecycle.respond(match_id, action, reason)
        return MatchResponse(
            success=True,
            message=f"Match {match.status}",
            match=self._to_match_summary(match)
        )

    def get_mentor_requests(self, mentor_user_id: str) -> MentorRequestsResponse:
        requests = self.lifecycle.list_mentor_requests(mentor_user_id)
        return MentorRequestsResponse(
            success=True,
            count=len(requests),
            requests=[self._to_mentor_request_item(r) for r in requests]
        )

    def get_mentor_mentees(self, program_id: str, mentor_user_id: str) -> MentorMenteesResponse:
        mentees = self.lifecycle.list_mentor_mentees(program_id, mentor_user_id)
        return MentorMenteesResponse(
            success=True,
            count=len(mentees),
            mentees=[self._to_mentor_mentee_item(m) for m in mentees]
        )

    def _to_match_summary(self, match: MentorMenteeMatch) -> MatchSummary:
        return MatchSummary(**self._match_fields(match))

    def _to_match_list_item(self, listing: MatchListing) -> MatchListItem:
        return MatchListItem(
            **self._match_fields(listing.match),
            program_name=listing.program_name,
            mentor_name=listing.mentor_name,
            mentor_email=listing.mentor_email,
            mentee_name=listing.mentee_name,
            mentee_email=listing.mentee_email,
        )

    def _to_mentor_request_item(self, request: MentorRequest) -> MentorRequestItem:
        mentor_reg = request.match.mentor_registration
        mentor_user = mentor_reg.user if mentor_reg else None
        return MentorRequestItem(
            **self._match_fields(request.match),
            program_name=request.program_name,
            mentor_name=mentor_user.full_name if mentor_user else "",
            mentor_email=mentor_user.email if mentor_user else None,
            mentee_name=request.mentee_name,
            mentee_email=request.mentee_email,
            days_remaining=request.days_remaining,
        )

    def _to_mentor_mentee_item(self, mentee: MentorMentee) -> MentorMenteeItem:
        return MentorMenteeItem(
            **self._match_fields(mentee.match),
            program_name=mentee.program_name,
            mentee=self._to_mentee_summary(mentee.registration) if mentee.registration else None,
        )

    def _match_fields(self, match: MentorMenteeMatch) -> dict:
        return {
            'match_id': safe_str(match.id),
            'program_id': safe_str(match.program_id),
            'mentor_id': safe_str(match.mentor_id),
            'mentee_id': safe_str(match.mentee_id),
            'mentor_registration_id': safe_str(match.mentor_registration_id),
            'mentee_registration_id': safe_str(match.mentee_registration_id),
            'status': match.status,
            'match_type': match.match_type,
            'match_score': safe_float(match.match_score),
            'score_breakdown': {k: safe_float(v, 0.0) for k, v in (match.score_breakdown or {}).items()},
            'preferred_choice_order': match.preferred_choice_order,
            'matched_by': safe_str(match.matched_by),
            'matched_at': safe_datetime_iso(match.matched_at),
            'auto_reject_at': safe_datetime_iso(match.auto_reject_at),
            'responded_at': safe_datetime_iso(match.responded_at),
            'rejection_reason': match.rejection_reason,
        }

    def _to_mentee_summary(self, registration: MenteeRegistration) -> MenteeSummary:
        return MenteeSummary(
            registration_id=safe_str(registration.id),
            mentee_id=safe_str(registration.mentee_id),
            user_id=safe_str(registration.user_id),
            name=registration.full_name,
            email=registration.personal_email,
            status=registration.status,
            areas_of_mentoring=list(registration.areas_of_mentoring or []),
            preferred_mentors=[str(ref) for ref in (registration.preferred_mentors or [])],
        )
