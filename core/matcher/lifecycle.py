#!/usr/bin/env python3
"""
Match Lifecycle - the mentor acceptance state machine.

    pending_mentor_acceptance --accept--> accepted
                              --reject--> rejected
                              --sweep---> auto_rejected

All three target states are terminal. A pending match may be accepted only
up to its ``auto_reject_at`` deadline; after that the sweep flips it to
auto_rejected and the mentee becomes eligible for the next matching run.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig
from core.errors import (
    InvalidMatchAction,
    InvalidMatchState,
    MatchExpired,
    MatchNotFound,
    MenteeNotApproved,
    MentorCapacityExceeded,
    ProgramNotFound,
    RejectionReasonTooShort,
)
from core.matcher.service import mentor_capacity
from core.utils import as_utc, days_remaining
from database.models import (
    MentorMenteeMatch,
    MenteeRegistration,
    ACTIVE_STATUSES,
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_AUTO_REJECTED,
    utcnow,
)
from database.repository import MatchingRepository
from database.repositories.base import as_uuid

logger = logging.getLogger(__name__)

AUTO_REJECT_REASON = "Auto-rejected: mentor did not respond within the acceptance window"

ACTION_ACCEPT = 'accept'
ACTION_REJECT = 'reject'


@dataclass
class MentorRequest:
    """A pending match as shown to the mentor who has to answer it."""
    match: MentorMenteeMatch
    program_name: Optional[str]
    mentee_name: str
    mentee_email: Optional[str]
    days_remaining: int


@dataclass
class MentorMentee:
    """A mentee assigned to a mentor, with the registration the mentee filled in."""
    match: MentorMenteeMatch
    registration: Optional[MenteeRegistration]
    program_name: Optional[str]


@dataclass
class MenteeMatchStatus:
    registration_id: str
    registration_status: str
    current_match: Optional[MentorMenteeMatch] = None
    history: List[MentorMenteeMatch] = field(default_factory=list)


class MatchLifecycleService:
    """Applies mentor responses and auto-rejections to matches."""

    def __init__(self, db: Session, config: Optional[MatchingConfig] = None):
        self.db = db
        self.repo = MatchingRepository(db)
        self.config = config or MatchingConfig()

    def respond(
        self,
        match_id: Any,
        action: str,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> MentorMenteeMatch:
        """
        Accept or reject a pending match.

        Args:
            match_id: Match id
            action: 'accept' or 'reject'
            reason: Rejection reason (required for reject)
            now: Clock override

        Returns:
            The updated match

        Raises:
            InvalidMatchAction, MatchNotFound, InvalidMatchState,
            MatchExpired, MentorCapacityExceeded, RejectionReasonTooShort
        """
        now = as_utc(now or utcnow())
        action = (action or '').strip().lower()
        if action not in (ACTION_ACCEPT, ACTION_REJECT):
            raise InvalidMatchAction()

        try:
            match = self.repo.matches.get_for_update(match_id)
            if match is None:
                raise MatchNotFound(f"Match {match_id} not found")
            if match.status != STATUS_PENDING:
                raise InvalidMatchState(f"Match is already {match.status}")

            if action == ACTION_ACCEPT:
                self._accept(match, now)
            else:
                self._reject(match, reason, now)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Match {match.id} {match.status} by mentor {match.mentor_id}")
        return match

    def _accept(self, match: MentorMenteeMatch, now: datetime) -> None:
        if now > as_utc(match.auto_reject_at):
            raise MatchExpired()

        capacity = mentor_capacity(match.mentor_registration, match.program, self.config)
        accepted = self.repo.matches.count_for_mentor(
            match.program_id,
            match.mentor_registration_id,
            statuses=(STATUS_ACCEPTED,)
        )
        if accepted >= capacity:
            raise MentorCapacityExceeded(
                f"Mentor has reached the maximum capacity of {capacity} mentees for this program"
            )

        match.status = STATUS_ACCEPTED
        match.responded_at = now

    def _reject(self, match: MentorMenteeMatch, reason: Optional[str], now: datetime) -> None:
        min_length = self.config.rejection_reason_min_length
        if len((reason or '').strip()) < min_length:
            raise RejectionReasonTooShort(
                f"Rejection reason must be at least {min_length} characters"
            )

        match.status = STATUS_REJECTED
        match.rejection_reason = reason
        match.responded_at = now

    def sweep_expired_matches(
        self,
        program_id: Optional[Any] = None,
        now: Optional[datetime] = None
    ) -> int:
        """
        Auto-reject pending matches whose acceptance deadline has passed.

        Each match is committed on its own; a row that fails is logged and
        skipped so one bad record cannot stall the batch. Re-running after
        every eligible match has flipped is a no-op.

        Args:
            program_id: Restrict the sweep to one programme (all when None)
            now: Clock override

        Returns:
            Number of matches auto-rejected
        """
        now = as_utc(now or utcnow())
        if program_id is not None:
            program_id = as_uuid(program_id)
            if program_id is None:
                return 0

        expired_ids = [m.id for m in self.repo.matches.get_expired_pending(now, program_id)]
        if not expired_ids:
            return 0

        swept = 0
        for match_id in expired_ids:
            try:
                match = self.repo.matches.get_for_update(match_id)
                # Answered or swept by someone else since the scan
                if match is None or match.status != STATUS_PENDING:
                    self.db.rollback()
                    continue
                if as_utc(match.auto_reject_at) >= now:
                    self.db.rollback()
                    continue

                match.status = STATUS_AUTO_REJECTED
                match.rejection_reason = AUTO_REJECT_REASON
                match.responded_at = now
                self.db.commit()
                swept += 1
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to auto-reject match {match_id}: {e}", exc_info=True)

        logger.info(f"Auto-reject sweep: {swept} of {len(expired_ids)} expired matches rejected")
        return swept

    def list_mentor_requests(
        self,
        mentor_user_id: Any,
        now: Optional[datetime] = None
    ) -> List[MentorRequest]:
        """Pending requests awaiting this mentor's answer, newest first."""
        now = as_utc(now or utcnow())
        self.sweep_expired_matches(now=now)

        requests = []
        for match in self.repo.matches.get_pending_for_mentor(mentor_user_id):
            mentee = match.mentee_registration
            requests.append(MentorRequest(
                match=match,
                program_name=match.program.name if match.program else None,
                mentee_name=mentee.full_name if mentee else '',
                mentee_email=mentee.personal_email if mentee else None,
                days_remaining=days_remaining(match.auto_reject_at, now),
            ))
        return requests

    def list_mentor_mentees(
        self,
        program_id: Any,
        mentor_user_id: Any,
        now: Optional[datetime] = None
    ) -> List[MentorMentee]:
        """
        Mentees a mentor currently holds in a programme, pending or accepted,
        newest first.

        Raises:
            ProgramNotFound: unknown programme
        """
        program = self.repo.programs.get_by_id(program_id)
        if program is None:
            raise ProgramNotFound(f"Program {program_id} not found")

        self.sweep_expired_matches(program_id=program.id, now=now)

        return [
            MentorMentee(
                match=match,
                registration=match.mentee_registration,
                program_name=program.name,
            )
            for match in self.repo.matches.get_active_for_mentor(program.id, mentor_user_id)
        ]

    def get_mentee_status(
        self,
        program_id: Any,
        mentee_ref: Any,
        now: Optional[datetime] = None
    ) -> MenteeMatchStatus:
        """
        Current match and full history for one mentee.

        Raises:
            ProgramNotFound: unknown programme
            MenteeNotApproved: no registration for this mentee in the programme
        """
        program = self.repo.programs.get_by_id(program_id)
        if program is None:
            raise ProgramNotFound(f"Program {program_id} not found")

        self.sweep_expired_matches(program_id=program.id, now=now)

        registration = self.repo.registrations.find_mentee(program.id, mentee_ref)
        if registration is None:
            raise MenteeNotApproved("Mentee is not registered for this program")

        history = self.repo.matches.get_matches_for_mentee(program.id, registration.id)
        current = next((m for m in history if m.status in ACTIVE_STATUSES), None)
        return MenteeMatchStatus(
            registration_id=str(registration.id),
            registration_status=registration.status,
            current_match=current,
            history=history,
        )
