"""
Stato derivato di assignment e submission.

Nessuno stato viene salvato: pubblicazione e consegna si calcolano a ogni
lettura confrontando i timestamp con il "now" passato dal chiamante.
"""
import logging
from typing import List, Optional, Sequence

from app.database.assignment_repo import AssignmentRepo
from app.database.query import (
    KeyQuery,
    RangeCondition,
    RangeOp,
    STUDENT_SUBMITTED_INDEX,
    TUTOR_PUBLISHED_INDEX,
)
from app.database.submission_repo import SubmissionRepo
from app.schemas.assignment import Assignment
from app.schemas.status import (
    PublishedFilter,
    PublishedStatus,
    SubmissionFilter,
    SubmissionStatus,
)
from app.schemas.submission import NOT_SUBMITTED, Submission, Submitted, Unsubmitted

logger = logging.getLogger(__name__)


def publication_status(assignment: Assignment, now: int) -> PublishedStatus:
    if assignment.publishedAt > now:
        return PublishedStatus.SCHEDULED
    return PublishedStatus.ONGOING


def submission_status(submission: Submission, assignment: Assignment, now: int) -> SubmissionStatus:
    state = submission.state
    if isinstance(state, Submitted):
        return SubmissionStatus.SUBMITTED
    if isinstance(state, Unsubmitted):
        if assignment.deadline < now:
            return SubmissionStatus.OVERDUE
        return SubmissionStatus.PENDING
    raise TypeError(f"Stato submission sconosciuto: {state!r}")


def parse_published_filter(value: Optional[str]) -> PublishedFilter:
    if not value:
        return PublishedFilter.ALL
    try:
        return PublishedFilter(value)
    except ValueError:
        raise ValueError("Invalid published_status filter")


def parse_submission_filter(value: Optional[str]) -> SubmissionFilter:
    if not value:
        return SubmissionFilter.ALL
    try:
        return SubmissionFilter(value)
    except ValueError:
        raise ValueError("Invalid submission_status filter")


def tutor_listing_query(tutor_id: str, published: PublishedFilter, now: int) -> KeyQuery:
    if published is PublishedFilter.SCHEDULED:
        cond = RangeCondition(RangeOp.GT, now)
    elif published is PublishedFilter.ONGOING:
        cond = RangeCondition(RangeOp.LTE, now)
    else:
        cond = None
    return KeyQuery(index=TUTOR_PUBLISHED_INDEX, key=tutor_id, range=cond)


def student_listing_query(student_id: str, submission: SubmissionFilter) -> KeyQuery:
    # "diverso da 0" non si puo' esprimere sulla sort key: SUBMITTED usa > 0
    if submission is SubmissionFilter.SUBMITTED:
        cond = RangeCondition(RangeOp.GT, NOT_SUBMITTED)
    elif submission in (SubmissionFilter.PENDING, SubmissionFilter.OVERDUE):
        # OVERDUE e' un sottoinsieme di PENDING, rifinito dopo il join
        cond = RangeCondition(RangeOp.EQ, NOT_SUBMITTED)
    else:
        cond = None
    return KeyQuery(index=STUDENT_SUBMITTED_INDEX, key=student_id, range=cond)


def matches_published(assignment: Assignment, published: PublishedFilter, now: int) -> bool:
    if published is PublishedFilter.ALL:
        return True
    return publication_status(assignment, now).value == published.value


class StatusService:

    @staticmethod
    async def list_for_tutor(
        tutor_id: str,
        published: PublishedFilter,
        now: int,
        assignments: AssignmentRepo,
    ) -> Sequence[Assignment]:
        return await assignments.query(tutor_listing_query(tutor_id, published, now))

    @staticmethod
    async def list_for_student(
        student_id: str,
        published: PublishedFilter,
        submission: SubmissionFilter,
        now: int,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
    ) -> List[Assignment]:
        """
        Pipeline a due fasi:
        1) scan delle submission sull'indice studentId-submittedAt
        2) un fetch dell'assignment per ogni submission trovata
        3) filtro OVERDUE (deadline < now), poi filtro di pubblicazione
        """
        rows = await submissions.query(student_listing_query(student_id, submission))

        joined: List[Assignment] = []
        seen = set()
        for row in rows:
            if row.assignmentId in seen:
                continue
            seen.add(row.assignmentId)
            assignment = await assignments.find_one(row.assignmentId)
            if assignment is None:
                # riga orfana lasciata da una cancellazione interrotta: la saltiamo invece
                # di far fallire il listing (scelta voluta, prima il listing falliva)
                logger.warning(
                    "Submission %s senza assignment %s", row.submissionId, row.assignmentId
                )
                continue
            joined.append(assignment)

        if submission is SubmissionFilter.OVERDUE:
            joined = [a for a in joined if a.deadline < now]

        return [a for a in joined if matches_published(a, published, now)]
