import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class MentoringProgram(Base):
    """
    A mentoring programme run by a tenant.

    The three dates define the matching window: matching may start once
    both registration periods have closed and must finish before
    ``matching_end_date``.
    """
    __tablename__ = 'mentoring_program'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True)

    name = Column(Text, nullable=False)
    category = Column(Text)
    status = Column(Text, nullable=False, default='draft')  # draft|published|archived

    registration_end_date_mentor = Column(TIMESTAMP(timezone=True), nullable=False)
    registration_end_date_mentee = Column(TIMESTAMP(timezone=True), nullable=False)
    matching_end_date = Column(TIMESTAMP(timezone=True), nullable=False)

    # Overrides the configured per-mentor capacity for this programme
    max_mentees_per_mentor = Column(Integer, nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    mentor_registrations = relationship("MentorRegistration", back_populates="program")
    mentee_registrations = relationship("MenteeRegistration", back_populates="program")

    __table_args__ = (
        Index('idx_mentoring_program_tenant', 'tenant_id'),
    )
