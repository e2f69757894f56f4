"""
Forma delle query sugli indici secondari.

Lo store supporta solo: uguaglianza sulla partition key e, opzionalmente,
una singola condizione (uguaglianza o range da un lato) sulla sort key.
Niente "diverso da", niente join tra collection.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RangeOp(str, Enum):
    EQ = "eq"
    GT = "gt"
    LTE = "lte"


@dataclass(frozen=True)
class RangeCondition:
    op: RangeOp
    value: int

    def matches(self, candidate: int) -> bool:
        if self.op is RangeOp.EQ:
            return candidate == self.value
        if self.op is RangeOp.GT:
            return candidate > self.value
        return candidate <= self.value


@dataclass(frozen=True)
class KeyQuery:
    index: str
    key: str
    range: Optional[RangeCondition] = None


# indici disponibili: nome -> (partition key, sort key)
TUTOR_PUBLISHED_INDEX = "tutorId-publishedAt"
STUDENT_SUBMITTED_INDEX = "studentId-submittedAt"
ASSIGNMENT_SUBMITTED_INDEX = "assignmentId-submittedAt"

INDEXES = {
    TUTOR_PUBLISHED_INDEX: ("tutorId", "publishedAt"),
    STUDENT_SUBMITTED_INDEX: ("studentId", "submittedAt"),
    ASSIGNMENT_SUBMITTED_INDEX: ("assignmentId", "submittedAt"),
}

_MONGO_OPS = {RangeOp.GT: "$gt", RangeOp.LTE: "$lte"}


def index_attributes(index: str) -> tuple:
    try:
        return INDEXES[index]
    except KeyError:
        raise ValueError(f"Indice sconosciuto: {index}")


def to_mongo_filter(query: KeyQuery) -> dict:
    partition, sort = index_attributes(query.index)
    filt = {partition: query.key}
    if query.range is not None:
        if query.range.op is RangeOp.EQ:
            filt[sort] = query.range.value
        else:
            filt[sort] = {_MONGO_OPS[query.range.op]: query.range.value}
    return filt
