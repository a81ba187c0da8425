from .base import Base, utcnow
from .tenant import Tenant
from .user import User, AlumniProfile
from .program import MentoringProgram
from .registration import MentorRegistration, MenteeRegistration
from .match import (
    MentorMenteeMatch,
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_AUTO_REJECTED,
    ACTIVE_STATUSES,
    MATCH_TYPE_PREFERRED,
    MATCH_TYPE_ALGORITHM,
    MATCH_TYPE_MANUAL,
)

__all__ = [
    'Base',
    'utcnow',
    'Tenant',
    'User',
    'AlumniProfile',
    'MentoringProgram',
    'MentorRegistration',
    'MenteeRegistration',
    'MentorMenteeMatch',
    'STATUS_PENDING',
    'STATUS_ACCEPTED',
    'STATUS_REJECTED',
    'STATUS_AUTO_REJECTED',
    'ACTIVE_STATUSES',
    'MATCH_TYPE_PREFERRED',
    'MATCH_TYPE_ALGORITHM',
    'MATCH_TYPE_MANUAL',
]
