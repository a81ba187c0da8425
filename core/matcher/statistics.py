#!/usr/bin/env python3
"""
Statistics Reporter - read-only views over a programme's matches.

Also owns the read-side join that attaches mentor and mentee display data
to match rows, so the assignment engine never has to load it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from sqlalchemy.orm import Session

from core.errors import ProgramNotFound
from database.models import (
    MentorMenteeMatch,
    MenteeRegistration,
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_AUTO_REJECTED,
    MATCH_TYPE_PREFERRED,
    MATCH_TYPE_ALGORITHM,
    MATCH_TYPE_MANUAL,
)
from database.repository import MatchingRepository

logger = logging.getLogger(__name__)


@dataclass
class MatchStatistics:
    total: int = 0
    accepted: int = 0
    pending: int = 0
    rejected: int = 0
    auto_rejected: int = 0
    rejected_total: int = 0
    total_mentees: int = 0
    matched_mentees: int = 0
    unmatched_mentees: int = 0
    average_score: float = 0.0
    preferred_matches: int = 0
    algorithm_matches: int = 0
    manual_matches: int = 0


@dataclass
class MatchListing:
    """A match joined with the display data the dashboard shows."""
    match: MentorMenteeMatch
    program_name: Optional[str]
    mentor_name: str
    mentor_email: Optional[str]
    mentee_name: str
    mentee_email: Optional[str]


class StatisticsReporter:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MatchingRepository(db)

    def _program(self, program_id: Any):
        program = self.repo.programs.get_by_id(program_id)
        if program is None:
            raise ProgramNotFound(f"Program {program_id} not found")
        return program

    def _matched_check(self, program_id: Any) -> Callable[[MenteeRegistration], bool]:
        # Matched under this registration or under another one of the same mentee
        registrations = self.repo.matches.get_active_mentee_registration_ids(program_id)
        mentees = self.repo.matches.get_active_mentee_ids(program_id)
        return lambda reg: reg.id in registrations or reg.mentee_id in mentees

    def get_statistics(self, program_id: Any) -> MatchStatistics:
        """
        Aggregate match counts for the dashboard summary cards.

        The average covers every match that carries a score, manual
        matches included. Zero matches yields all-zero statistics.
        """
        program = self._program(program_id)
        matches = self.repo.matches.get_matches_for_program(program.id)

        stats = MatchStatistics(total=len(matches))
        scores = []
        for match in matches:
            if match.status == STATUS_ACCEPTED:
                stats.accepted += 1
            elif match.status == STATUS_PENDING:
                stats.pending += 1
            elif match.status == STATUS_REJECTED:
                stats.rejected += 1
            elif match.status == STATUS_AUTO_REJECTED:
                stats.auto_rejected += 1

            if match.match_type == MATCH_TYPE_PREFERRED:
                stats.preferred_matches += 1
            elif match.match_type == MATCH_TYPE_ALGORITHM:
                stats.algorithm_matches += 1
            elif match.match_type == MATCH_TYPE_MANUAL:
                stats.manual_matches += 1

            if match.match_score is not None:
                scores.append(float(match.match_score))

        stats.rejected_total = stats.rejected + stats.auto_rejected
        if scores:
            stats.average_score = round(sum(scores) / len(scores), 1)

        mentees = self.repo.registrations.get_approved_mentees(program.id)
        stats.total_mentees = len(mentees)
        is_matched = self._matched_check(program.id)
        stats.matched_mentees = sum(1 for reg in mentees if is_matched(reg))
        stats.unmatched_mentees = stats.total_mentees - stats.matched_mentees
        return stats

    def list_unmatched_mentees(self, program_id: Any) -> List[MenteeRegistration]:
        """Approved mentees holding neither a pending nor an accepted match."""
        program = self._program(program_id)
        is_matched = self._matched_check(program.id)
        return [
            reg for reg in self.repo.registrations.get_approved_mentees(program.id)
            if not is_matched(reg)
        ]

    def list_matches(self, program_id: Any, status: Optional[str] = None) -> List[MatchListing]:
        program = self._program(program_id)
        listings = []
        for match in self.repo.matches.get_matches_for_program(program.id, status=status):
            mentor_reg = match.mentor_registration
            mentor_user = mentor_reg.user if mentor_reg else None
            mentee_reg = match.mentee_registration
            listings.append(MatchListing(
                match=match,
                program_name=program.name,
                mentor_name=(mentor_reg.preferred_name if mentor_reg and mentor_reg.preferred_name
                             else mentor_user.full_name if mentor_user else ''),
                mentor_email=mentor_user.email if mentor_user else None,
                mentee_name=mentee_reg.full_name if mentee_reg else '',
                mentee_email=mentee_reg.personal_email if mentee_reg else None,
            ))
        return listings
