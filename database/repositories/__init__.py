from database.repositories.base import BaseRepository
from database.repositories.program import ProgramRepository
from database.repositories.registration import RegistrationRepository
from database.repositories.match import MatchRepository

__all__ = [
    'BaseRepository',
    'ProgramRepository',
    'RegistrationRepository',
    'MatchRepository',
]
