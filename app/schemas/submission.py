from dataclasses import dataclass
from typing import Union
from pydantic import BaseModel

from app.schemas.status import SubmissionStatus

# valore di submittedAt per le righe non ancora consegnate
NOT_SUBMITTED = 0


@dataclass(frozen=True)
class Unsubmitted:
    pass


@dataclass(frozen=True)
class Submitted:
    at: int
    remark: str


SubmissionState = Union[Unsubmitted, Submitted]


class SubmissionCreate(BaseModel):
    remark: str = ""


class Submission(BaseModel):
    assignmentId: str
    studentId: str
    submissionId: str
    remark: str = ""
    submittedAt: int = NOT_SUBMITTED

    @property
    def state(self) -> SubmissionState:
        if self.submittedAt == NOT_SUBMITTED:
            return Unsubmitted()
        return Submitted(at=self.submittedAt, remark=self.remark)


class SubmissionView(Submission):
    status: SubmissionStatus
