import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from datetime import timedelta
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from exam_portal.core.config import settings
from exam_portal.core.constants import ExamStatusEnum, QuestionTypeEnum, RoleEnum
from exam_portal.core.database import Base, build_engine
from exam_portal.core.security import create_access_token
from exam_portal.crud.exam import exam as crud_exam
from exam_portal.crud.question import question as crud_question
from exam_portal.schemas.user import UserContext
from exam_portal.utils import deps as deps_utils
from exam_portal.utils.clock import utcnow
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    engine = build_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_ids():
    counter = {"next": 1000}

    def _next_user_id() -> int:
        counter["next"] += 1
        return counter["next"]
    return _next_user_id

@pytest.fixture
def student_context(user_ids):
    return UserContext(user_id=user_ids(), role=RoleEnum.STUDENT)

@pytest.fixture
def evaluator_context(user_ids):
    return UserContext(user_id=user_ids(), role=RoleEnum.EVALUATOR)

@pytest.fixture
def admin_context(user_ids):
    return UserContext(user_id=user_ids(), role=RoleEnum.ADMIN)

@pytest.fixture
def auth_headers():
    def _auth_headers(context: UserContext) -> dict:
        token = create_access_token(context.user_id, context.role)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

@pytest.fixture
def exam_factory(db_session):
    def _exam_factory(status=ExamStatusEnum.ACTIVE, total_marks=15, passing_marks=10,
                      start_date=None, end_date=None, title="Test Exam"):
        now = utcnow()
        return crud_exam.create(db_session, obj_in={
            "title": title,
            "total_marks": total_marks,
            "passing_marks": passing_marks,
            "start_date": start_date or now - timedelta(days=1),
            "end_date": end_date or now + timedelta(days=1),
            "status": status,
        })
    return _exam_factory

@pytest.fixture
def question_factory(db_session):
    def _question_factory(exam, type=QuestionTypeEnum.MCQ, marks=5, correct_answer="A",
                          options=None, order_number=0, question_text="Question?"):
        if type == QuestionTypeEnum.MCQ and options is None:
            options = ["A", "B", "C", "D"]
        if type == QuestionTypeEnum.TEXT:
            correct_answer = None
        return crud_question.create(db_session, obj_in={
            "exam_id": exam.id,
            "question_text": question_text,
            "type": type,
            "options": options,
            "correct_answer": correct_answer,
            "marks": marks,
            "order_number": order_number,
        })
    return _question_factory

@pytest.fixture
def two_question_exam(exam_factory, question_factory):
    """Q1 mcq worth 5 (correct "A"), Q2 free text worth 10."""
    exam = exam_factory(total_marks=15, passing_marks=10)
    q1 = question_factory(exam, type=QuestionTypeEnum.MCQ, marks=5, correct_answer="A", order_number=1)
    q2 = question_factory(exam, type=QuestionTypeEnum.TEXT, marks=10, order_number=2)
    return exam, q1, q2
