import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List

from app.database.query import ASSIGNMENT_SUBMITTED_INDEX, KeyQuery
from app.database.submission_repo import SubmissionRepo
from app.schemas.submission import NOT_SUBMITTED, Submission

logger = logging.getLogger(__name__)


def create_submission_id() -> str:
    return str(uuid.uuid4())


def new_submission(assignment_id: str, student_id: str) -> Submission:
    return Submission(
        assignmentId=assignment_id,
        studentId=student_id,
        submissionId=create_submission_id(),
        remark="",
        submittedAt=NOT_SUBMITTED,
    )


@dataclass(frozen=True)
class RosterDiff:
    to_add: List[str] = field(default_factory=list)
    to_remove: List[str] = field(default_factory=list)


def _unique(ids: Iterable[str]) -> List[str]:
    out: List[str] = []
    for i in ids:
        if i not in out:
            out.append(i)
    return out


def diff_roster(current: Iterable[str], requested: Iterable[str]) -> RosterDiff:
    current = _unique(current)
    requested = _unique(requested)
    return RosterDiff(
        to_add=[s for s in requested if s not in current],
        to_remove=[s for s in current if s not in requested],
    )


class RosterService:

    @staticmethod
    async def apply(assignment_id: str, diff: RosterDiff, repo: SubmissionRepo) -> None:
        """
        Scritture indipendenti, una per riga, senza transazione.
        Al primo errore l'eccezione risale e le righe gia' scritte restano.
        """
        for student_id in diff.to_remove:
            await repo.delete(assignment_id, student_id)
        for student_id in diff.to_add:
            await repo.put(new_submission(assignment_id, student_id))
        logger.info(
            "Roster %s: +%d -%d", assignment_id, len(diff.to_add), len(diff.to_remove)
        )

    @staticmethod
    async def current_roster(assignment_id: str, repo: SubmissionRepo) -> List[str]:
        rows = await repo.query(KeyQuery(index=ASSIGNMENT_SUBMITTED_INDEX, key=assignment_id))
        return [r.studentId for r in rows]

    @staticmethod
    async def sync(assignment_id: str, requested: Iterable[str], repo: SubmissionRepo) -> RosterDiff:
        current = await RosterService.current_roster(assignment_id, repo)
        diff = diff_roster(current, requested)
        await RosterService.apply(assignment_id, diff, repo)
        return diff
