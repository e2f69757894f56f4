from pydantic import BaseModel
from typing import List, Optional

from app.schemas.status import PublishedStatus


class AssignmentCreate(BaseModel):
    description: str
    deadline: int
    students: List[str]
    publishedAt: Optional[int] = None


class AssignmentUpdate(BaseModel):
    description: Optional[str] = None
    deadline: Optional[int] = None
    students: Optional[List[str]] = None
    publishedAt: Optional[int] = None


class Assignment(BaseModel):
    assignmentId: str
    tutorId: str
    description: str
    deadline: int
    publishedAt: int


class AssignmentView(Assignment):
    publishedStatus: PublishedStatus
