#!/usr/bin/env python3
"""
Matching Service - creates mentor/mentee matches for a programme.

Two entry points:
- run_matching: the three-pass assignment engine over every approved,
  currently unmatched mentee
- create_manual_match: an operator-chosen pairing that skips scoring-based
  selection but obeys the same invariants

Both run the read-check-create sequence inside one transaction, under the
programme write lock, so concurrent callers can never give a mentee two
active matches or push a mentor past capacity. A unique-index conflict
from another writer surfaces as AlreadyMatched.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig
from core.errors import (
    AlreadyMatched,
    MenteeNotApproved,
    MentorCapacityExceeded,
    MentorNotApproved,
    ProgramNotFound,
)
from core.matcher.dto import MentorCandidate, MenteeCandidate, PlannedMatch
from core.matcher.engine import assign
from core.matcher.locks import program_write_lock
from core.matcher.window import check_matching_window
from core.scorer import calculate_match_score
from database.models import (
    MentoringProgram,
    MentorRegistration,
    MenteeRegistration,
    MentorMenteeMatch,
    STATUS_PENDING,
    MATCH_TYPE_MANUAL,
    utcnow,
)
from database.repository import MatchingRepository
from database.repositories.base import as_uuid
from database.repositories.registration import APPROVED

logger = logging.getLogger(__name__)


@dataclass
class MatchingRunResult:
    """Outcome of one run_matching call."""
    program_id: str
    created: List[MentorMenteeMatch] = field(default_factory=list)
    unmatched: List[MenteeRegistration] = field(default_factory=list)
    total_mentees: int = 0
    skipped: int = 0  # already held an active match


def mentor_capacity(
    registration: MentorRegistration,
    program: MentoringProgram,
    config: MatchingConfig
) -> int:
    """Effective capacity: the registration hint, capped by the programme limit."""
    ceiling = program.max_mentees_per_mentor
    if ceiling is None:
        ceiling = config.max_mentees_per_mentor
    if registration.max_mentees is not None:
        return min(registration.max_mentees, ceiling)
    return ceiling


def _profile_fields(user) -> Dict[str, Any]:
    profile = user.profile if user is not None else None
    if profile is None:
        return {'industry': None, 'company': None, 'programme': None, 'skills': []}
    return {
        'industry': profile.industry,
        'company': profile.current_company,
        'programme': profile.programme or profile.department,
        'skills': list(profile.skills or []),
    }


def to_mentor_candidate(registration: MentorRegistration, capacity: int) -> MentorCandidate:
    fields = _profile_fields(registration.user)
    return MentorCandidate(
        registration_id=str(registration.id),
        user_id=str(registration.user_id),
        capacity=capacity,
        industry=fields['industry'],
        company=fields['company'],
        programme=fields['programme'],
        skills=list(registration.areas_of_mentoring or []) + fields['skills'],
    )


def to_mentee_candidate(registration: MenteeRegistration) -> MenteeCandidate:
    fields = _profile_fields(registration.user)
    return MenteeCandidate(
        registration_id=str(registration.id),
        mentee_id=str(registration.mentee_id),
        industry=fields['industry'],
        company=fields['company'],
        programme=fields['programme'],
        skills=list(registration.areas_of_mentoring or []) + fields['skills'],
        preferred_mentors=[str(ref) for ref in (registration.preferred_mentors or [])],
    )


class MatchingService:
    """
    Creates matches for a programme.

    Designed to be driven per request: construct with a Session and the
    matching configuration, call one operation, discard.
    """

    def __init__(self, db: Session, config: Optional[MatchingConfig] = None):
        self.db = db
        self.repo = MatchingRepository(db)
        self.config = config or MatchingConfig()

    def run_matching(self, program_id: Any, now: Optional[datetime] = None) -> MatchingRunResult:
        """
        Match every approved mentee that has no active match.

        Args:
            program_id: Programme to match
            now: Clock override (defaults to current UTC time)

        Returns:
            MatchingRunResult with created matches and unmatched registrations

        Raises:
            ProgramNotFound, MatchingNotReady, MatchingClosed, AlreadyMatched
        """
        now = now or utcnow()

        with program_write_lock(as_uuid(program_id) or program_id):
            try:
                program = self.repo.programs.get_for_update(program_id)
                if program is None:
                    raise ProgramNotFound(f"Program {program_id} not found")
                check_matching_window(program, now)

                mentor_regs = self.repo.registrations.get_approved_mentors(program.id)
                mentee_regs = self.repo.registrations.get_approved_mentees(program.id)
                active = self.repo.matches.get_active_mentee_registration_ids(program.id)
                matched_mentees = self.repo.matches.get_active_mentee_ids(program.id)

                # A mentee holding two registrations still gets one active match
                eligible = []
                for reg in mentee_regs:
                    if reg.id in active or reg.mentee_id in matched_mentees:
                        continue
                    matched_mentees.add(reg.mentee_id)
                    eligible.append(reg)
                committed = {
                    str(mentor_reg_id): count
                    for mentor_reg_id, count in self.repo.matches.count_by_mentor(program.id).items()
                }
                declined = {
                    str(mentee_reg_id): {str(m) for m in mentor_reg_ids}
                    for mentee_reg_id, mentor_reg_ids in self.repo.matches.get_declined_pairs(program.id).items()
                }

                plan = assign(
                    mentees=[to_mentee_candidate(reg) for reg in eligible],
                    mentors=[
                        to_mentor_candidate(reg, mentor_capacity(reg, program, self.config))
                        for reg in mentor_regs
                    ],
                    committed=committed,
                    config=self.config,
                    declined=declined,
                )

                mentees_by_id = {str(reg.id): reg for reg in eligible}
                mentors_by_id = {str(reg.id): reg for reg in mentor_regs}

                created = []
                for planned in plan.matches:
                    match = self._build_match(
                        program,
                        mentees_by_id[planned.mentee.registration_id],
                        mentors_by_id[planned.mentor.registration_id],
                        planned,
                        now
                    )
                    created.append(self.repo.matches.add(match))

                self.db.flush()
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(f"Concurrent matching conflict for program {program_id}: {e.orig}")
                raise AlreadyMatched("A mentee was matched concurrently; re-run matching") from e
            except Exception:
                self.db.rollback()
                raise

        result = MatchingRunResult(
            program_id=str(program_id),
            created=created,
            unmatched=[mentees_by_id[m.registration_id] for m in plan.unmatched],
            total_mentees=len(mentee_regs),
            skipped=len(mentee_regs) - len(eligible),
        )
        logger.info(
            f"Matching run for program {program_id}: {len(result.created)} created, "
            f"{len(result.unmatched)} unmatched, {result.skipped} skipped "
            f"(of {result.total_mentees} approved mentees)"
        )
        return result

    def create_manual_match(
        self,
        program_id: Any,
        mentee_ref: Any,
        mentor_ref: Any,
        matched_by: Optional[Any] = None,
        now: Optional[datetime] = None
    ) -> MentorMenteeMatch:
        """
        Pair a specific mentee with a specific mentor.

        Args:
            program_id: Programme id
            mentee_ref: Mentee registration id or user id
            mentor_ref: Mentor user id or registration id
            matched_by: Operator user id, recorded on the match
            now: Clock override

        Raises:
            ProgramNotFound, MenteeNotApproved, AlreadyMatched,
            MentorNotApproved, MentorCapacityExceeded
        """
        now = now or utcnow()

        with program_write_lock(as_uuid(program_id) or program_id):
            try:
                program = self.repo.programs.get_for_update(program_id)
                if program is None:
                    raise ProgramNotFound(f"Program {program_id} not found")

                mentee_reg = self.repo.registrations.find_mentee(program.id, mentee_ref)
                if mentee_reg is None or mentee_reg.status != APPROVED:
                    raise MenteeNotApproved()
                active = self.repo.matches.get_active_match_for_mentee(
                    program.id, mentee_reg.id, mentee_id=mentee_reg.mentee_id
                )
                if active is not None:
                    raise AlreadyMatched()

                mentor_reg = self.repo.registrations.find_mentor(program.id, mentor_ref)
                if mentor_reg is None or mentor_reg.status != APPROVED:
                    raise MentorNotApproved()

                capacity = mentor_capacity(mentor_reg, program, self.config)
                if self.repo.matches.count_for_mentor(program.id, mentor_reg.id) >= capacity:
                    raise MentorCapacityExceeded(
                        f"Mentor has reached the maximum capacity of {capacity} mentees for this program"
                    )

                mentor = to_mentor_candidate(mentor_reg, capacity)
                mentee = to_mentee_candidate(mentee_reg)
                planned = PlannedMatch(
                    mentee=mentee,
                    mentor=mentor,
                    match_type=MATCH_TYPE_MANUAL,
                    score=calculate_match_score(mentor, mentee, self.config.weights),
                )
                match = self.repo.matches.add(
                    self._build_match(program, mentee_reg, mentor_reg, planned, now, matched_by)
                )
                self.db.flush()
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise AlreadyMatched() from e
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            f"Manual match {match.id}: mentee registration {mentee_reg.id} -> "
            f"mentor {mentor_reg.user_id} (program {program_id})"
        )
        return match

    def _build_match(
        self,
        program: MentoringProgram,
        mentee_reg: MenteeRegistration,
        mentor_reg: MentorRegistration,
        planned: PlannedMatch,
        now: datetime,
        matched_by: Optional[Any] = None
    ) -> MentorMenteeMatch:
        return MentorMenteeMatch(
            program_id=program.id,
            tenant_id=program.tenant_id,
            mentor_id=mentor_reg.user_id,
            mentee_id=mentee_reg.mentee_id,
            mentor_registration_id=mentor_reg.id,
            mentee_registration_id=mentee_reg.id,
            status=STATUS_PENDING,
            match_type=planned.match_type,
            match_score=planned.score.total,
            score_breakdown=planned.score.to_dict(),
            preferred_choice_order=planned.preferred_choice_order,
            mentee_selected_mentors=list(mentee_reg.preferred_mentors or []),
            matched_by=as_uuid(matched_by),
            matched_at=now,
            auto_reject_at=now + timedelta(days=self.config.auto_reject_days),
        )
