import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, JSON, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class User(Base):
    """
    Platform user. Only the display fields the matching dashboard needs.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenant.id', ondelete='CASCADE'), nullable=True)
    email = Column(Text, nullable=False, unique=True)
    first_name = Column(Text)
    last_name = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    profile = relationship("AlumniProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class AlumniProfile(Base):
    """
    Career and study profile linked to a user.

    Supplies the industry / programme / skills metadata that the
    compatibility scorer reads.
    """
    __tablename__ = 'alumni_profile'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)

    industry = Column(Text)
    current_company = Column(Text)
    programme = Column(Text)
    department = Column(Text)
    skills = Column(JSON, default=list)

    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")

    __table_args__ = (
        Index('idx_alumni_profile_user', 'user_id'),
    )
