import pytest

from app.database.assignment_repo import AssignmentRepo
from app.database.query import KeyQuery, index_attributes
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import Assignment
from app.schemas.auth import UserRecord
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission

NOW = 1_700_000_000_000
HOUR = 3_600_000


def _matches(item, query: KeyQuery) -> bool:
    partition, sort = index_attributes(query.index)
    if getattr(item, partition) != query.key:
        return False
    return query.range is None or query.range.matches(getattr(item, sort))


# ------------------------- Fake repositories -------------------------
class FakeAssignmentRepo(AssignmentRepo):
    def __init__(self):
        self.items: dict[str, Assignment] = {}
        self.calls: list[str] = []

    async def put(self, assignment: Assignment) -> str:
        self.calls.append("put")
        self.items[assignment.assignmentId] = assignment
        return assignment.assignmentId

    async def find_one(self, assignment_id: str):
        self.calls.append("find_one")
        return self.items.get(assignment_id)

    async def delete(self, assignment_id: str):
        self.calls.append("delete")
        return self.items.pop(assignment_id, None) is not None

    async def query(self, query: KeyQuery):
        self.calls.append("query")
        return [a for a in self.items.values() if _matches(a, query)]


class FakeSubmissionRepo(SubmissionRepo):
    def __init__(self):
        self.items: dict[tuple, Submission] = {}
        self.calls: list[str] = []
        self.queries: list[KeyQuery] = []

    async def put(self, submission: Submission) -> None:
        self.calls.append("put")
        self.items[(submission.assignmentId, submission.studentId)] = submission

    async def find_one(self, assignment_id: str, student_id: str):
        self.calls.append("find_one")
        return self.items.get((assignment_id, student_id))

    async def delete(self, assignment_id: str, student_id: str):
        self.calls.append("delete")
        return self.items.pop((assignment_id, student_id), None) is not None

    async def query(self, query: KeyQuery):
        self.calls.append("query")
        self.queries.append(query)
        return [s for s in self.items.values() if _matches(s, query)]

    def roster(self, assignment_id: str) -> set:
        return {sid for (aid, sid) in self.items if aid == assignment_id}


class FlakySubmissionRepo(FakeSubmissionRepo):
    """Fallisce alla scrittura numero fail_at (put o delete), come uno storage che cade a meta' batch."""

    def __init__(self, fail_at: int):
        super().__init__()
        self.fail_at = fail_at
        self.writes = 0

    def _tick(self):
        self.writes += 1
        if self.writes == self.fail_at:
            raise RuntimeError("storage down")

    async def put(self, submission: Submission) -> None:
        self._tick()
        await super().put(submission)

    async def delete(self, assignment_id: str, student_id: str):
        self._tick()
        return await super().delete(assignment_id, student_id)


class FakeUserRepo(UserRepo):
    def __init__(self, users=()):
        self.users = {u.username: u for u in users}

    async def find_by_username(self, username: str):
        return self.users.get(username)


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def assignments():
    return FakeAssignmentRepo()

@pytest.fixture
def submissions():
    return FakeSubmissionRepo()

@pytest.fixture
def tutor():
    return UserContext(user_id="t1", role=Role.TUTOR)

@pytest.fixture
def other_tutor():
    return UserContext(user_id="t2", role=Role.TUTOR)

@pytest.fixture
def student():
    return UserContext(user_id="s1", role=Role.STUDENT)

@pytest.fixture
def student2():
    return UserContext(user_id="s2", role=Role.STUDENT)


def make_user(username: str, password: str, role: Role) -> UserRecord:
    from app.services.auth_service import hash_password
    return UserRecord(username=username, passwordHash=hash_password(password), role=role)
