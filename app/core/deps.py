from fastapi import Request
from app.core.clock import Clock, system_clock
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} non inizializzato")
    return value


def get_assignment_repo(request: Request) -> AssignmentRepo:
    return _from_state(request, "assignment_repo")


def get_submission_repo(request: Request) -> SubmissionRepo:
    return _from_state(request, "submission_repo")


def get_user_repo(request: Request) -> UserRepo:
    return _from_state(request, "user_repo")


def get_clock(request: Request) -> Clock:
    # i test possono fissare l'orologio su app.state.clock
    return getattr(request.app.state, "clock", None) or system_clock
