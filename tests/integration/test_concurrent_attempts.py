"""Concurrent requests on separate sessions against the shared test database."""
import threading

import pytest
from sqlalchemy.orm import sessionmaker

from exam_portal.core.constants import ExamStatusEnum, QuestionTypeEnum
from exam_portal.core.exceptions import ExamPortalError
from exam_portal.crud.exam import exam as crud_exam
from exam_portal.crud.exam_attempt import exam_attempt as crud_exam_attempt
from exam_portal.crud.question import question as crud_question
from exam_portal.services.exam_attempt import exam_attempt_service
from exam_portal.utils.clock import utcnow


@pytest.fixture
def session_factory(database_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)


@pytest.fixture
def committed_exam(session_factory):
    db = session_factory()
    exam = crud_exam.create(db, obj_in={
        "title": "Concurrent Exam",
        "total_marks": 5,
        "passing_marks": 3,
        "start_date": None,
        "end_date": None,
        "status": ExamStatusEnum.ACTIVE,
    })
    question = crud_question.create(db, obj_in={
        "exam_id": exam.id,
        "question_text": "Pick A",
        "type": QuestionTypeEnum.MCQ,
        "options": ["A", "B"],
        "correct_answer": "A",
        "marks": 5,
        "order_number": 1,
    })
    exam_id, question_id = exam.id, question.id
    db.commit()
    db.close()

    yield exam_id, question_id

    db = session_factory()
    db.delete(crud_exam.get(db, id=exam_id))
    db.commit()
    db.close()


def _run_concurrently(session_factory, work):
    barrier = threading.Barrier(2, timeout=10)
    results = []
    lock = threading.Lock()

    def _worker():
        db = session_factory()
        try:
            barrier.wait()
            outcome = work(db)
            db.commit()
        except ExamPortalError as exc:
            db.rollback()
            outcome = type(exc).__name__
        finally:
            db.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=_worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


def test_concurrent_finalize_completes_once(session_factory, committed_exam, student_context):
    exam_id, question_id = committed_exam
    db = session_factory()
    attempt, _ = exam_attempt_service.start_exam_attempt(db, exam_id, student_context)
    exam_attempt_service.submit_answer(db, attempt.id, question_id, "A", student_context)
    attempt_id = attempt.id
    db.commit()
    db.close()

    def _finalize(db):
        exam_attempt_service.submit_exam(db, attempt_id, student_context)
        return "ok"

    results = _run_concurrently(session_factory, _finalize)

    assert sorted(results) == ["AlreadyCompleted", "ok"]
    db = session_factory()
    try:
        attempt = crud_exam_attempt.get(db, id=attempt_id)
        assert attempt.total_score == 5
    finally:
        db.close()


def test_concurrent_start_yields_one_pending_attempt(session_factory, committed_exam, student_context):
    exam_id, _ = committed_exam

    def _start(db):
        attempt, _ = exam_attempt_service.start_exam_attempt(db, exam_id, student_context, now=utcnow())
        return attempt.id

    results = _run_concurrently(session_factory, _start)

    assert len(results) == 2
    assert results[0] == results[1]
    db = session_factory()
    try:
        assert len(crud_exam_attempt.get_all_by_user(db, user_id=student_context.user_id)) == 1
    finally:
        db.close()
