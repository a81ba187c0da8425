from typing import Any, Optional
from sqlalchemy import select

from database.models import MentoringProgram
from database.repositories.base import BaseRepository, as_uuid


class ProgramRepository(BaseRepository):
    def get_by_id(self, program_id: Any) -> Optional[MentoringProgram]:
        program_id = as_uuid(program_id)
        if program_id is None:
            return None
        return self.db.get(MentoringProgram, program_id)

    def get_for_update(self, program_id: Any) -> Optional[MentoringProgram]:
        """Load the programme row locked for the rest of the transaction.

        Serialises concurrent matching writers across processes; SQLite
        ignores FOR UPDATE.
        """
        program_id = as_uuid(program_id)
        if program_id is None:
            return None
        stmt = select(MentoringProgram).where(
            MentoringProgram.id == program_id
        ).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()
