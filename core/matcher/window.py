from datetime import datetime

from core.errors import MatchingClosed, MatchingNotReady
from core.utils import as_utc
from database.models import MentoringProgram


def check_matching_window(program: MentoringProgram, now: datetime) -> None:
    """
    Raise unless matching may be initiated at ``now``.

    Matching opens once both registration periods have ended and closes at
    ``matching_end_date``.

    Raises:
        MatchingNotReady: a registration period is still open
        MatchingClosed: the matching deadline has passed
    """
    now = as_utc(now)
    if now < as_utc(program.registration_end_date_mentor) or now < as_utc(program.registration_end_date_mentee):
        raise MatchingNotReady()
    if now > as_utc(program.matching_end_date):
        raise MatchingClosed()

