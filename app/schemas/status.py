from enum import Enum


class PublishedStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    ONGOING = "ONGOING"


class SubmissionStatus(str, Enum):
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    SUBMITTED = "SUBMITTED"


# filtri accettati in query string: gli stati derivati piu' ALL
class PublishedFilter(str, Enum):
    ALL = "ALL"
    SCHEDULED = "SCHEDULED"
    ONGOING = "ONGOING"


class SubmissionFilter(str, Enum):
    ALL = "ALL"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    SUBMITTED = "SUBMITTED"
