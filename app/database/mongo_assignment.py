# app/database/mongo_assignment.py
from typing import Sequence, Optional, List
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.assignment_repo import AssignmentRepo
from app.database.query import KeyQuery, TUTOR_PUBLISHED_INDEX, to_mongo_filter
from app.schemas.assignment import Assignment


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["assignments"]

    def _from_doc(self, d: dict) -> Assignment:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Assignment(**base)

    async def put(self, assignment: Assignment) -> str:
        await self.col.replace_one(
            {"assignmentId": assignment.assignmentId},
            assignment.model_dump(),
            upsert=True,
        )
        return assignment.assignmentId

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        d = await self.col.find_one({"assignmentId": str(assignment_id)})
        return self._from_doc(d) if d else None

    async def delete(self, assignment_id: str) -> bool:
        res = await self.col.delete_one({"assignmentId": str(assignment_id)})
        return res.deleted_count > 0

    async def query(self, query: KeyQuery) -> Sequence[Assignment]:
        if query.index != TUTOR_PUBLISHED_INDEX:
            raise ValueError(f"Indice non supportato sugli assignment: {query.index}")
        cursor = self.col.find(to_mongo_filter(query)).sort("publishedAt", 1)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def ensure_indexes(self):
        await self.col.create_index("assignmentId", unique=True)
        await self.col.create_index([("tutorId", 1), ("publishedAt", 1)])
