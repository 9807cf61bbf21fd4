import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from iqtest.db.base import Base
from iqtest.db.session import get_db
from iqtest.engine.question_bank import QuestionBank, QuestionRecord, get_question_bank
from iqtest.main import app


def make_question(qid, category="logic", correct=0, options=("A", "B", "C", "D")):
    return QuestionRecord(
        id=qid,
        category=category,
        prompt=f"Prompt {qid}",
        options=tuple(options),
        correct_option_index=correct,
        difficulty="medium",
    )


@pytest.fixture
def small_bank():
    """Ten questions: five 'pattern' (p1..p5), five 'logic' (l1..l5), all answer index 1."""
    questions = [make_question(f"p{i}", "pattern", correct=1) for i in range(1, 6)]
    questions += [make_question(f"l{i}", "logic", correct=1) for i in range(1, 6)]
    return QuestionBank(questions)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine, small_bank):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_question_bank] = lambda: small_bank
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
