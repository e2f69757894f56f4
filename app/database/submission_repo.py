from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Optional

from app.database.query import KeyQuery
from app.schemas.submission import Submission


class SubmissionRepo(ABC):
    @abstractmethod
    async def put(self, submission: Submission) -> None:
        """Inserisce o sostituisce la riga (assignmentId, studentId)."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        """Ritorna la submission di uno studente per un assignment, oppure None."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, assignment_id: str, student_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def query(self, query: KeyQuery) -> Sequence[Submission]:
        """Ritorna le submission che soddisfano la key condition sull'indice indicato."""
        raise NotImplementedError
