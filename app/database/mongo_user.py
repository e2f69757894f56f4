from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.user_repo import UserRepo
from app.schemas.auth import UserRecord


class MongoUserRepository(UserRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["users"]

    async def find_by_username(self, username: str) -> Optional[UserRecord]:
        d = await self.col.find_one({"username": str(username)})
        if not d:
            return None
        return UserRecord(**{k: v for k, v in d.items() if k != "_id"})

    async def ensure_indexes(self):
        await self.col.create_index("username", unique=True)
