from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Optional

from app.database.query import KeyQuery
from app.schemas.assignment import Assignment


class AssignmentRepo(ABC):
    @abstractmethod
    async def put(self, assignment: Assignment) -> str:
        """Inserisce o sostituisce un assignment e ritorna il suo ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, assignment_id: str) -> bool:
        """Cancella un assignment. Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, query: KeyQuery) -> Sequence[Assignment]:
        """Ritorna gli assignment che soddisfano la key condition sull'indice indicato."""
        raise NotImplementedError
