import logging
from typing import Any, List, Optional
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload

from database.models import MentorRegistration, MenteeRegistration, User
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)

APPROVED = 'approved'


class RegistrationRepository(BaseRepository):
    def get_approved_mentors(self, program_id: Any) -> List[MentorRegistration]:
        stmt = (
            select(MentorRegistration)
            .where(
                MentorRegistration.program_id == program_id,
                MentorRegistration.status == APPROVED
            )
            .options(selectinload(MentorRegistration.user).selectinload(User.profile))
            .order_by(MentorRegistration.created_at, MentorRegistration.id)
        )
        return self.db.execute(stmt).scalars().all()

    def get_approved_mentees(self, program_id: Any) -> List[MenteeRegistration]:
        # Registration order is the stable input order of the assignment passes
        stmt = (
            select(MenteeRegistration)
            .where(
                MenteeRegistration.program_id == program_id,
                MenteeRegistration.status == APPROVED
            )
            .options(selectinload(MenteeRegistration.user).selectinload(User.profile))
            .order_by(MenteeRegistration.created_at, MenteeRegistration.id)
        )
        return self.db.execute(stmt).scalars().all()

    def find_mentor(self, program_id: Any, mentor_ref: Any) -> Optional[MentorRegistration]:
        """Resolve a mentor by user id or registration id, any status."""
        ref = as_uuid(mentor_ref)
        if ref is None:
            return None
        stmt = select(MentorRegistration).where(
            MentorRegistration.program_id == program_id,
            or_(MentorRegistration.id == ref, MentorRegistration.user_id == ref)
        ).order_by(MentorRegistration.created_at)
        return self.db.execute(stmt).scalars().first()

    def find_mentee(self, program_id: Any, mentee_ref: Any) -> Optional[MenteeRegistration]:
        """Resolve a mentee by registration id or user id, any status."""
        ref = as_uuid(mentee_ref)
        if ref is None:
            return None
        stmt = select(MenteeRegistration).where(
            MenteeRegistration.program_id == program_id,
            or_(MenteeRegistration.id == ref, MenteeRegistration.user_id == ref)
        ).order_by(MenteeRegistration.created_at)
        return self.db.execute(stmt).scalars().first()
