from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.auth import UserRecord


class UserRepo(ABC):
    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[UserRecord]:
        raise NotImplementedError
