from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.clock import Clock
from app.core.deps import get_assignment_repo, get_clock, get_submission_repo
from app.core.errors import ConflictError, InvalidReferenceError
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentUpdate, AssignmentView
from app.schemas.context import Role, UserContext
from app.schemas.submission import Submission, SubmissionCreate, SubmissionView

from app.services.assignment_service import AssignmentService
from app.services.auth_service import AuthService
from app.services.status_service import publication_status
from app.services.status_service import submission_status as derive_submission_status


router = APIRouter()

AssignmentRepoDep = Annotated[AssignmentRepo, Depends(get_assignment_repo)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repo)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def _to_http(e: Exception) -> HTTPException:
    if isinstance(e, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    # riferimenti non validi e input errati sono entrambi errori del client
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _view(assignment: Assignment, now: int) -> dict:
    return AssignmentView(
        **assignment.model_dump(),
        publishedStatus=publication_status(assignment, now),
    ).model_dump()


def _submission_view(submission: Submission, assignment: Assignment, now: int) -> dict:
    return SubmissionView(
        **submission.model_dump(),
        status=derive_submission_status(submission, assignment, now),
    ).model_dump()


@router.post("/assignments")
async def create_assignment_endpoint(
    data: AssignmentCreate,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
):
    now = clock()
    try:
        assignment = await AssignmentService.create_assignment(
            data, user, assignments, submissions, now
        )
    except (PermissionError, ValueError) as e:
        raise _to_http(e)
    return {"assignment": _view(assignment, now)}


@router.put("/assignments/{assignment_id}")
async def update_assignment_endpoint(
    assignment_id: str,
    data: AssignmentUpdate,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
):
    now = clock()
    try:
        assignment = await AssignmentService.update_assignment(
            assignment_id, data, user, assignments, submissions, now
        )
    except (PermissionError, ValueError, InvalidReferenceError) as e:
        raise _to_http(e)
    return {"assignment": _view(assignment, now)}


@router.delete("/assignments/{assignment_id}")
async def delete_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
):
    try:
        assignment = await AssignmentService.delete_assignment(
            assignment_id, user, assignments, submissions
        )
    except (PermissionError, InvalidReferenceError) as e:
        raise _to_http(e)
    return {"assignment": _view(assignment, clock())}


@router.post("/assignments/{assignment_id}/submissions")
async def submit_endpoint(
    assignment_id: str,
    data: SubmissionCreate,
    user: UserDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
):
    try:
        submission = await AssignmentService.submit(
            assignment_id, data.remark, user, submissions, clock()
        )
    except (PermissionError, ValueError, InvalidReferenceError, ConflictError) as e:
        raise _to_http(e)
    return {"submission": submission.model_dump()}


@router.get("/assignments")
async def list_assignments_endpoint(
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
    published_status: Optional[str] = None,
    submission_status: Optional[str] = None,
):
    now = clock()
    try:
        items = await AssignmentService.list_assignments(
            user, published_status, submission_status, assignments, submissions, now
        )
    except (PermissionError, ValueError) as e:
        raise _to_http(e)
    return {"assignments": [_view(a, now) for a in items]}


@router.get("/assignments/{assignment_id}")
async def get_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    clock: ClockDep,
):
    now = clock()
    try:
        assignment, rows = await AssignmentService.get_assignment(
            assignment_id, user, assignments, submissions
        )
    except (PermissionError, InvalidReferenceError) as e:
        raise _to_http(e)

    views = [_submission_view(r, assignment, now) for r in rows]
    if user.role is Role.STUDENT:
        return {"assignment": _view(assignment, now), "submission": views[0]}
    return {"assignment": _view(assignment, now), "submissions": views}
