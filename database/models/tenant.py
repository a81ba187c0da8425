import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid

from .base import Base, utcnow


class Tenant(Base):
    __tablename__ = 'tenant'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
