import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Numeric, JSON, Uuid, Index, text as sql_text
from sqlalchemy.orm import relationship

from .base import Base, utcnow

STATUS_PENDING = 'pending_mentor_acceptance'
STATUS_ACCEPTED = 'accepted'
STATUS_REJECTED = 'rejected'
STATUS_AUTO_REJECTED = 'auto_rejected'

ACTIVE_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED)

MATCH_TYPE_PREFERRED = 'preferred'
MATCH_TYPE_ALGORITHM = 'algorithm'
MATCH_TYPE_MANUAL = 'manual'

_ACTIVE_FILTER = sql_text("status IN ('pending_mentor_acceptance', 'accepted')")


class MentorMenteeMatch(Base):
    """
    A proposed or settled pairing between one mentor and one mentee.

    Tracks:
    - How the pair was chosen (preferred / algorithm / manual)
    - Compatibility score and its breakdown
    - Mentor acceptance workflow with an auto-reject deadline
    """
    __tablename__ = 'mentor_mentee_match'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id = Column(Uuid, ForeignKey('mentoring_program.id', ondelete='CASCADE'), nullable=False)
    tenant_id = Column(Uuid, ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True)

    mentor_id = Column(Uuid, nullable=False)
    mentee_id = Column(Uuid, nullable=False)
    mentor_registration_id = Column(Uuid, ForeignKey('mentor_registration.id', ondelete='CASCADE'), nullable=False)
    mentee_registration_id = Column(Uuid, ForeignKey('mentee_registration.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default=STATUS_PENDING)
    match_type = Column(Text, nullable=False)
    match_score = Column(Numeric(5, 2))
    score_breakdown = Column(JSON, default=dict)
    preferred_choice_order = Column(Integer, nullable=True)  # 1..3
    mentee_selected_mentors = Column(JSON, default=list)
    matched_by = Column(Uuid, nullable=True)

    matched_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    auto_reject_at = Column(TIMESTAMP(timezone=True), nullable=False)
    responded_at = Column(TIMESTAMP(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    mentor_registration = relationship("MentorRegistration")
    mentee_registration = relationship("MenteeRegistration")
    program = relationship("MentoringProgram")

    __table_args__ = (
        # One pending or accepted match per mentee per programme
        Index(
            'uq_match_active_mentee',
            'program_id', 'mentee_registration_id',
            unique=True,
            postgresql_where=_ACTIVE_FILTER,
            sqlite_where=_ACTIVE_FILTER,
        ),
        # Same rule keyed on mentee identity, across that mentee's registrations
        Index(
            'uq_match_active_mentee_identity',
            'program_id', 'mentee_id',
            unique=True,
            postgresql_where=_ACTIVE_FILTER,
            sqlite_where=_ACTIVE_FILTER,
        ),
        Index('idx_match_program_status', 'program_id', 'status'),
        Index('idx_match_mentor', 'mentor_id'),
        Index('idx_match_mentee', 'mentee_id'),
        Index('idx_match_auto_reject', 'auto_reject_at'),
    )
