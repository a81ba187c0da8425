import logging

from sqlalchemy.orm import Session

from database.repositories import ProgramRepository, RegistrationRepository, MatchRepository

logger = logging.getLogger(__name__)


class MatchingRepository:
    """Aggregate of the repositories the matching engine works through.

    All sub-repositories share one Session, so a unit of work spans them.
    """

    def __init__(self, db: Session):
        self.db = db
        self.programs = ProgramRepository(db)
        self.registrations = RegistrationRepository(db)
        self.matches = MatchRepository(db)
