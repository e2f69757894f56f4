# app/database/mongo_submission.py
from typing import Sequence, Optional, List
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.query import (
    KeyQuery,
    STUDENT_SUBMITTED_INDEX,
    ASSIGNMENT_SUBMITTED_INDEX,
    to_mongo_filter,
)
from app.database.submission_repo import SubmissionRepo
from app.schemas.submission import Submission


class MongoSubmissionRepository(SubmissionRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["submissions"]

    def _from_doc(self, d: dict) -> Submission:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Submission(**base)

    @staticmethod
    def _key(assignment_id: str, student_id: str) -> dict:
        return {"assignmentId": str(assignment_id), "studentId": str(student_id)}

    async def put(self, submission: Submission) -> None:
        await self.col.replace_one(
            self._key(submission.assignmentId, submission.studentId),
            submission.model_dump(),
            upsert=True,
        )

    async def find_one(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        d = await self.col.find_one(self._key(assignment_id, student_id))
        return self._from_doc(d) if d else None

    async def delete(self, assignment_id: str, student_id: str) -> bool:
        res = await self.col.delete_one(self._key(assignment_id, student_id))
        return res.deleted_count > 0

    async def query(self, query: KeyQuery) -> Sequence[Submission]:
        if query.index not in {STUDENT_SUBMITTED_INDEX, ASSIGNMENT_SUBMITTED_INDEX}:
            raise ValueError(f"Indice non supportato sulle submission: {query.index}")
        cursor = self.col.find(to_mongo_filter(query)).sort("submittedAt", 1)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def ensure_indexes(self):
        await self.col.create_index([("assignmentId", 1), ("studentId", 1)], unique=True)
        await self.col.create_index([("studentId", 1), ("submittedAt", 1)])
        await self.col.create_index([("assignmentId", 1), ("submittedAt", 1)])
