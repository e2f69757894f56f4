import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from app.core.errors import ConflictError, InvalidReferenceError
from app.database.assignment_repo import AssignmentRepo
from app.database.query import ASSIGNMENT_SUBMITTED_INDEX, KeyQuery, RangeCondition, RangeOp
from app.database.submission_repo import SubmissionRepo
from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentUpdate
from app.schemas.context import Role, UserContext
from app.schemas.submission import NOT_SUBMITTED, Submission, Submitted
from app.services.roster_service import RosterService, diff_roster
from app.services.status_service import (
    StatusService,
    parse_published_filter,
    parse_submission_filter,
)

logger = logging.getLogger(__name__)


def create_assignment_id() -> str:
    return str(uuid.uuid4())


def _is_tutor(user: UserContext) -> bool:
    return user.role is Role.TUTOR


def _is_student(user: UserContext) -> bool:
    return user.role is Role.STUDENT


def _require_tutor(user: UserContext) -> None:
    if not _is_tutor(user):
        raise PermissionError("Forbidden for non-tutor user")


def _require_student(user: UserContext) -> None:
    if not _is_student(user):
        raise PermissionError("Forbidden for non-student user")


def _require_owner(assignment: Assignment, user: UserContext) -> None:
    if assignment.tutorId != user.user_id:
        raise PermissionError("Assignment owned by another tutor")


# ---- validazione: sempre prima di toccare lo storage ----

def _check_description(description: str) -> None:
    if not description or not description.strip():
        raise ValueError("Description invalid")


def _check_deadline(deadline: int, now: int) -> None:
    if deadline <= now:
        raise ValueError("Deadline invalid")


def _check_published_at(published_at: int, now: int) -> None:
    if published_at < now:
        raise ValueError("Published at invalid")


def _check_students(students: List[str]) -> None:
    if not students or any(not s or not s.strip() for s in students):
        raise ValueError("Students list invalid")


def validate_create(data: AssignmentCreate, now: int) -> None:
    _check_description(data.description)
    _check_deadline(data.deadline, now)
    _check_students(data.students)
    if data.publishedAt is not None:
        _check_published_at(data.publishedAt, now)


def validate_update(data: AssignmentUpdate, now: int) -> None:
    if data.description is not None:
        _check_description(data.description)
    if data.deadline is not None:
        _check_deadline(data.deadline, now)
    if data.publishedAt is not None:
        _check_published_at(data.publishedAt, now)
    if data.students is not None:
        _check_students(data.students)


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AssignmentCreate,
        user: UserContext,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        now: int,
    ) -> Assignment:
        _require_tutor(user)
        validate_create(data, now)

        assignment = Assignment(
            assignmentId=create_assignment_id(),
            tutorId=str(user.user_id),
            description=data.description,
            deadline=data.deadline,
            publishedAt=data.publishedAt if data.publishedAt is not None else now,
        )
        await assignments.put(assignment)

        # fan-out: tutto il roster e' da aggiungere, niente da togliere
        diff = diff_roster([], data.students)
        await RosterService.apply(assignment.assignmentId, diff, submissions)
        logger.info(
            "Assignment %s creato da %s con %d studenti",
            assignment.assignmentId, user.user_id, len(diff.to_add),
        )
        return assignment

    @staticmethod
    async def update_assignment(
        assignment_id: str,
        data: AssignmentUpdate,
        user: UserContext,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        now: int,
    ) -> Assignment:
        _require_tutor(user)
        validate_update(data, now)

        current = await assignments.find_one(assignment_id)
        if current is None:
            raise InvalidReferenceError("Invalid assignment")
        _require_owner(current, user)

        changes = data.model_dump(exclude_none=True, exclude={"students"})
        updated = current.model_copy(update=changes)
        await assignments.put(updated)

        if data.students is not None:
            await RosterService.sync(assignment_id, data.students, submissions)
        return updated

    @staticmethod
    async def delete_assignment(
        assignment_id: str,
        user: UserContext,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
    ) -> Assignment:
        _require_tutor(user)

        current = await assignments.find_one(assignment_id)
        if current is None:
            raise InvalidReferenceError("Invalid assignment")
        _require_owner(current, user)

        # cascata non transazionale: un errore a meta' lascia righe orfane
        await assignments.delete(assignment_id)
        rows = await submissions.query(KeyQuery(index=ASSIGNMENT_SUBMITTED_INDEX, key=assignment_id))
        for row in rows:
            await submissions.delete(assignment_id, row.studentId)
        logger.info("Assignment %s cancellato con %d submission", assignment_id, len(rows))
        return current

    @staticmethod
    async def submit(
        assignment_id: str,
        remark: str,
        user: UserContext,
        submissions: SubmissionRepo,
        now: int,
    ) -> Submission:
        _require_student(user)
        if not remark or not remark.strip():
            raise ValueError("Remark invalid")

        row = await submissions.find_one(assignment_id, user.user_id)
        if row is None:
            raise InvalidReferenceError("Invalid assignment")
        if isinstance(row.state, Submitted):
            raise ConflictError("Submission already exists")

        row = row.model_copy(update={"remark": remark, "submittedAt": now})
        await submissions.put(row)
        return row

    @staticmethod
    async def get_assignment(
        assignment_id: str,
        user: UserContext,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
    ) -> Tuple[Assignment, Sequence[Submission]]:
        """
        Tutor: l'assignment e le sole submission consegnate.
        Studente: l'assignment e la propria riga, consegnata o no.
        """
        if _is_student(user):
            row = await submissions.find_one(assignment_id, user.user_id)
            if row is None:
                raise InvalidReferenceError("Invalid assignment")
            assignment = await assignments.find_one(assignment_id)
            if assignment is None:
                raise InvalidReferenceError("Invalid assignment")
            return assignment, [row]

        if _is_tutor(user):
            assignment = await assignments.find_one(assignment_id)
            if assignment is None:
                raise InvalidReferenceError("Invalid assignment")
            _require_owner(assignment, user)
            rows = await submissions.query(
                KeyQuery(
                    index=ASSIGNMENT_SUBMITTED_INDEX,
                    key=assignment_id,
                    range=RangeCondition(RangeOp.GT, NOT_SUBMITTED),
                )
            )
            return assignment, rows

        raise PermissionError(f"Ruolo non gestito: {user.role}")

    @staticmethod
    async def list_assignments(
        user: UserContext,
        published_status: Optional[str],
        submission_status: Optional[str],
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        now: int,
    ) -> Sequence[Assignment]:
        published = parse_published_filter(published_status)
        submission = parse_submission_filter(submission_status)

        if _is_tutor(user):
            # il filtro di consegna vale solo per gli studenti: qui viene ignorato
            return await StatusService.list_for_tutor(user.user_id, published, now, assignments)
        if _is_student(user):
            return await StatusService.list_for_student(
                user.user_id, published, submission, now, assignments, submissions
            )
        raise PermissionError(f"Ruolo non gestito: {user.role}")
