import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, JSON, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class MentorRegistration(Base):
    """Mentor sign-up for a programme."""
    __tablename__ = 'mentor_registration'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id = Column(Uuid, ForeignKey('mentoring_program.id', ondelete='CASCADE'), nullable=False)
    tenant_id = Column(Uuid, ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='submitted')  # submitted|approved|rejected
    preferred_name = Column(Text)
    areas_of_mentoring = Column(JSON, default=list)
    max_mentees = Column(Integer, nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    program = relationship("MentoringProgram", back_populates="mentor_registrations")
    user = relationship("User")

    __table_args__ = (
        Index('idx_mentor_reg_program_status', 'program_id', 'status'),
        Index('idx_mentor_reg_user', 'user_id'),
    )


class MenteeRegistration(Base):
    """
    Mentee sign-up for a programme.

    ``preferred_mentors`` holds up to three mentor references, each either a
    mentor user id or a mentor registration id, in order of preference.
    Mentees may register without a platform account, so ``user_id`` is
    optional.
    """
    __tablename__ = 'mentee_registration'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id = Column(Uuid, ForeignKey('mentoring_program.id', ondelete='CASCADE'), nullable=False)
    tenant_id = Column(Uuid, ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    status = Column(Text, nullable=False, default='submitted')
    first_name = Column(Text)
    last_name = Column(Text)
    personal_email = Column(Text)
    areas_of_mentoring = Column(JSON, default=list)
    preferred_mentors = Column(JSON, default=list)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    program = relationship("MentoringProgram", back_populates="mentee_registrations")
    user = relationship("User")

    __table_args__ = (
        Index('idx_mentee_reg_program_status', 'program_id', 'status'),
        Index('idx_mentee_reg_user', 'user_id'),
    )

    @property
    def mentee_id(self) -> uuid.UUID:
        """Identity recorded on matches: the user when known, else the registration."""
        return self.user_id or self.id

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
