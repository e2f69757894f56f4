import pytest

from app.database.query import (
    KeyQuery,
    RangeCondition,
    RangeOp,
    STUDENT_SUBMITTED_INDEX,
    TUTOR_PUBLISHED_INDEX,
    to_mongo_filter,
)
from app.schemas.assignment import Assignment
from app.schemas.status import PublishedFilter, PublishedStatus, SubmissionFilter, SubmissionStatus
from app.schemas.submission import Submission, Submitted, Unsubmitted
from app.services.status_service import (
    StatusService,
    parse_published_filter,
    parse_submission_filter,
    publication_status,
    student_listing_query,
    submission_status,
    tutor_listing_query,
)

from conftest import NOW, HOUR


def _assignment(aid="a1", tutor="t1", published=NOW, deadline=NOW + HOUR):
    return Assignment(
        assignmentId=aid, tutorId=tutor, description="Esercizi",
        deadline=deadline, publishedAt=published,
    )


def _submission(aid="a1", student="s1", at=0, remark=""):
    return Submission(
        assignmentId=aid, studentId=student, submissionId=f"sub-{aid}-{student}",
        remark=remark, submittedAt=at,
    )


# --------------------------- derivazione pura ---------------------------
def test_publication_status_boundary():
    a = _assignment(published=NOW)
    assert publication_status(a, NOW) == PublishedStatus.ONGOING
    assert publication_status(a, NOW - 1) == PublishedStatus.SCHEDULED

def test_same_record_changes_status_over_time():
    a = _assignment(published=NOW + HOUR, deadline=NOW + 2 * HOUR)
    s = _submission()
    assert publication_status(a, NOW) == PublishedStatus.SCHEDULED
    assert publication_status(a, NOW + HOUR) == PublishedStatus.ONGOING
    assert submission_status(s, a, NOW) == SubmissionStatus.PENDING
    assert submission_status(s, a, NOW + 3 * HOUR) == SubmissionStatus.OVERDUE

def test_submission_state_variants():
    assert _submission().state == Unsubmitted()
    assert _submission(at=NOW, remark="fatto").state == Submitted(at=NOW, remark="fatto")

def test_submitted_is_never_overdue():
    a = _assignment(deadline=NOW - HOUR, published=NOW - 2 * HOUR)
    s = _submission(at=NOW - 3 * HOUR, remark="fatto")
    assert submission_status(s, a, NOW) == SubmissionStatus.SUBMITTED


# ----------------------------- filtri -----------------------------------
def test_filters_default_to_all():
    assert parse_published_filter(None) is PublishedFilter.ALL
    assert parse_published_filter("") is PublishedFilter.ALL
    assert parse_submission_filter(None) is SubmissionFilter.ALL

def test_unknown_filters_are_rejected():
    with pytest.raises(ValueError, match="published_status"):
        parse_published_filter("LATE")
    with pytest.raises(ValueError, match="submission_status"):
        parse_submission_filter("pending")


# ------------------------- forma delle query ----------------------------
def test_tutor_query_shapes():
    assert tutor_listing_query("t1", PublishedFilter.ALL, NOW) == KeyQuery(TUTOR_PUBLISHED_INDEX, "t1")
    assert tutor_listing_query("t1", PublishedFilter.SCHEDULED, NOW).range == RangeCondition(RangeOp.GT, NOW)
    assert tutor_listing_query("t1", PublishedFilter.ONGOING, NOW).range == RangeCondition(RangeOp.LTE, NOW)

def test_student_query_shapes():
    assert student_listing_query("s1", SubmissionFilter.ALL) == KeyQuery(STUDENT_SUBMITTED_INDEX, "s1")
    assert student_listing_query("s1", SubmissionFilter.SUBMITTED).range == RangeCondition(RangeOp.GT, 0)
    pending = student_listing_query("s1", SubmissionFilter.PENDING)
    overdue = student_listing_query("s1", SubmissionFilter.OVERDUE)
    assert pending == overdue
    assert pending.range == RangeCondition(RangeOp.EQ, 0)

def test_mongo_filter_translation():
    assert to_mongo_filter(KeyQuery(TUTOR_PUBLISHED_INDEX, "t1")) == {"tutorId": "t1"}
    assert to_mongo_filter(tutor_listing_query("t1", PublishedFilter.SCHEDULED, NOW)) == {
        "tutorId": "t1", "publishedAt": {"$gt": NOW},
    }
    assert to_mongo_filter(student_listing_query("s1", SubmissionFilter.PENDING)) == {
        "studentId": "s1", "submittedAt": 0,
    }

def test_unknown_index_is_rejected():
    with pytest.raises(ValueError):
        to_mongo_filter(KeyQuery("studentId-deadline", "s1"))


# ------------------------------ listing ---------------------------------
@pytest.mark.asyncio
async def test_tutor_listing_by_publication(assignments, submissions):
    await assignments.put(_assignment("now", published=NOW))
    await assignments.put(_assignment("later", published=NOW + HOUR))
    await assignments.put(_assignment("other", tutor="t2"))

    all_ = await StatusService.list_for_tutor("t1", PublishedFilter.ALL, NOW, assignments)
    scheduled = await StatusService.list_for_tutor("t1", PublishedFilter.SCHEDULED, NOW, assignments)
    ongoing = await StatusService.list_for_tutor("t1", PublishedFilter.ONGOING, NOW, assignments)

    assert {a.assignmentId for a in all_} == {"now", "later"}
    assert [a.assignmentId for a in scheduled] == ["later"]
    assert [a.assignmentId for a in ongoing] == ["now"]

@pytest.mark.asyncio
async def test_student_overdue_is_subset_of_pending(assignments, submissions):
    await assignments.put(_assignment("late", published=NOW - 2 * HOUR, deadline=NOW - HOUR))
    await assignments.put(_assignment("open", published=NOW - 2 * HOUR, deadline=NOW + HOUR))
    await assignments.put(_assignment("done", published=NOW - 2 * HOUR, deadline=NOW - HOUR))
    await submissions.put(_submission("late"))
    await submissions.put(_submission("open"))
    await submissions.put(_submission("done", at=NOW - 3 * HOUR, remark="ok"))

    async def listing(f):
        rows = await StatusService.list_for_student(
            "s1", PublishedFilter.ALL, f, NOW, assignments, submissions
        )
        return {a.assignmentId for a in rows}

    pending = await listing(SubmissionFilter.PENDING)
    overdue = await listing(SubmissionFilter.OVERDUE)
    assert pending == {"late", "open"}
    assert overdue == {"late"}
    assert overdue <= pending
    assert await listing(SubmissionFilter.SUBMITTED) == {"done"}
    assert await listing(SubmissionFilter.ALL) == {"late", "open", "done"}

@pytest.mark.asyncio
async def test_student_listing_applies_publication_after_join(assignments, submissions):
    await assignments.put(_assignment("future", published=NOW + HOUR, deadline=NOW + 2 * HOUR))
    await assignments.put(_assignment("current", published=NOW - HOUR))
    await submissions.put(_submission("future"))
    await submissions.put(_submission("current"))

    scheduled = await StatusService.list_for_student(
        "s1", PublishedFilter.SCHEDULED, SubmissionFilter.ALL, NOW, assignments, submissions
    )
    assert [a.assignmentId for a in scheduled] == ["future"]
    assert submissions.queries[-1] == KeyQuery(STUDENT_SUBMITTED_INDEX, "s1")

@pytest.mark.asyncio
async def test_student_listing_skips_orphan_rows(assignments, submissions):
    await submissions.put(_submission("gone"))
    rows = await StatusService.list_for_student(
        "s1", PublishedFilter.ALL, SubmissionFilter.ALL, NOW, assignments, submissions
    )
    assert rows == []
