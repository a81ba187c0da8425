import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Set
from sqlalchemy import select, func, or_

from database.models import (
    MentorMenteeMatch,
    ACTIVE_STATUSES,
    STATUS_PENDING,
    STATUS_REJECTED,
    STATUS_AUTO_REJECTED,
)
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class MatchRepository(BaseRepository):
    def add(self, match: MentorMenteeMatch) -> MentorMenteeMatch:
        self.db.add(match)
        return match

    def get_match_by_id(self, match_id: Any) -> Optional[MentorMenteeMatch]:
        match_id = as_uuid(match_id)
        if match_id is None:
            return None
        return self.db.get(MentorMenteeMatch, match_id)

    def get_for_update(self, match_id: Any) -> Optional[MentorMenteeMatch]:
        match_id = as_uuid(match_id)
        if match_id is None:
            return None
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.id == match_id
        ).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_active_match_for_mentee(
        self,
        program_id: Any,
        mentee_registration_id: Any,
        mentee_id: Optional[Any] = None
    ) -> Optional[MentorMenteeMatch]:
        """Active match held by this registration, or by the same mentee under another one."""
        mentee_filter = MentorMenteeMatch.mentee_registration_id == mentee_registration_id
        if mentee_id is not None:
            mentee_filter = or_(mentee_filter, MentorMenteeMatch.mentee_id == mentee_id)
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.program_id == program_id,
            mentee_filter,
            MentorMenteeMatch.status.in_(ACTIVE_STATUSES)
        )
        return self.db.execute(stmt).scalars().first()

    def get_active_mentee_registration_ids(self, program_id: Any) -> Set[Any]:
        stmt = select(MentorMenteeMatch.mentee_registration_id).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.status.in_(ACTIVE_STATUSES)
        )
        return set(self.db.execute(stmt).scalars().all())

    def get_active_mentee_ids(self, program_id: Any) -> Set[Any]:
        stmt = select(MentorMenteeMatch.mentee_id).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.status.in_(ACTIVE_STATUSES)
        )
        return set(self.db.execute(stmt).scalars().all())

    def count_by_mentor(
        self,
        program_id: Any,
        statuses=ACTIVE_STATUSES
    ) -> Dict[Any, int]:
        """Match counts per mentor registration, restricted to ``statuses``."""
        stmt = (
            select(MentorMenteeMatch.mentor_registration_id, func.count(MentorMenteeMatch.id))
            .where(
                MentorMenteeMatch.program_id == program_id,
                MentorMenteeMatch.status.in_(statuses)
            )
            .group_by(MentorMenteeMatch.mentor_registration_id)
        )
        return {mentor_reg_id: count for mentor_reg_id, count in self.db.execute(stmt).all()}

    def count_for_mentor(
        self,
        program_id: Any,
        mentor_registration_id: Any,
        statuses=ACTIVE_STATUSES
    ) -> int:
        stmt = select(func.count(MentorMenteeMatch.id)).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.mentor_registration_id == mentor_registration_id,
            MentorMenteeMatch.status.in_(statuses)
        )
        return self.db.execute(stmt).scalar_one()

    def get_declined_pairs(self, program_id: Any) -> Dict[Any, Set[Any]]:
        """Mentor registrations that already turned each mentee down."""
        stmt = select(
            MentorMenteeMatch.mentee_registration_id,
            MentorMenteeMatch.mentor_registration_id
        ).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.status.in_((STATUS_REJECTED, STATUS_AUTO_REJECTED))
        )
        declined: Dict[Any, Set[Any]] = defaultdict(set)
        for mentee_reg_id, mentor_reg_id in self.db.execute(stmt).all():
            declined[mentee_reg_id].add(mentor_reg_id)
        return dict(declined)

    def get_expired_pending(
        self,
        now: datetime,
        program_id: Optional[Any] = None
    ) -> List[MentorMenteeMatch]:
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.status == STATUS_PENDING,
            MentorMenteeMatch.auto_reject_at < now
        )
        if program_id is not None:
            stmt = stmt.where(MentorMenteeMatch.program_id == program_id)
        stmt = stmt.order_by(MentorMenteeMatch.auto_reject_at)
        return self.db.execute(stmt).scalars().all()

    def get_matches_for_program(
        self,
        program_id: Any,
        status: Optional[str] = None
    ) -> List[MentorMenteeMatch]:
        stmt = select(MentorMenteeMatch).where(MentorMenteeMatch.program_id == program_id)
        if status:
            stmt = stmt.where(MentorMenteeMatch.status == status)
        stmt = stmt.order_by(MentorMenteeMatch.matched_at.desc(), MentorMenteeMatch.id)
        return self.db.execute(stmt).scalars().all()

    def get_matches_for_mentee(
        self,
        program_id: Any,
        mentee_registration_id: Any
    ) -> List[MentorMenteeMatch]:
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.mentee_registration_id == mentee_registration_id
        ).order_by(MentorMenteeMatch.matched_at.desc())
        return self.db.execute(stmt).scalars().all()

    def get_pending_for_mentor(self, mentor_user_id: Any) -> List[MentorMenteeMatch]:
        mentor_user_id = as_uuid(mentor_user_id)
        if mentor_user_id is None:
            return []
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.mentor_id == mentor_user_id,
            MentorMenteeMatch.status == STATUS_PENDING
        ).order_by(MentorMenteeMatch.matched_at.desc())
        return self.db.execute(stmt).scalars().all()


    def get_active_for_mentor(self, program_id: Any, mentor_user_id: Any) -> List[MentorMenteeMatch]:
        """Pending and accepted matches of one mentor in a programme, newest first."""
        mentor_user_id = as_uuid(mentor_user_id)
        if mentor_user_id is None:
            return []
        stmt = select(MentorMenteeMatch).where(
            MentorMenteeMatch.program_id == program_id,
            MentorMenteeMatch.mentor_id == mentor_user_id,
            MentorMenteeMatch.status.in_(ACTIVE_STATUSES)
        ).order_by(MentorMenteeMatch.matched_at.desc(), MentorMenteeMatch.id)
        return self.db.execute(stmt).scalars().all()
