"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Every test gets a fresh `user_id`, so histories and grants never leak
between tests even though the database lives for the whole session.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_badge_worker.db")
os.environ.setdefault("APP_ENV", "test")

import uuid
from datetime import date, datetime, time, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from badge_worker.db.base import Base, get_db
from badge_worker.main import app
from badge_worker.models import (
    FlipFeel,
    FlipFeelChoice,
    FlipFeelQuestion,
    FlipFeelResponse,
    GratitudeEntry,
    JournalEntry,
    MoodCheckIn,
)

SQLITE_URL = "sqlite:///./test_badge_worker.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def at(day: date, hour: int = 12) -> datetime:
    """UTC timestamp on `day`."""
    return datetime.combine(day, time(hour=hour), tzinfo=timezone.utc)


class Seeder:
    """Writes activity history the way the recording services would."""

    def __init__(self, db):
        self.db = db

    def journal(self, user_id: str, *days: date, deleted: bool = False) -> None:
        for d in days:
            self.db.add(JournalEntry(
                user_id=user_id,
                content_encrypted={"iv": "x", "content": "x", "tag": "x"},
                is_deleted=deleted,
                created_at=at(d),
                updated_at=at(d),
            ))
        self.db.commit()

    def gratitude(self, user_id: str, *days: date, deleted: bool = False) -> None:
        for d in days:
            self.db.add(GratitudeEntry(
                user_id=user_id,
                is_deleted=deleted,
                created_at=at(d),
                updated_at=at(d),
            ))
        self.db.commit()

    def mood(self, user_id: str, *days: date) -> None:
        for d in days:
            self.db.add(MoodCheckIn(user_id=user_id, mood_1="calm", checked_in_at=at(d)))
        self.db.commit()

    def flip_feel(
        self,
        user_id: str,
        finished_on: date | None,
        categories: tuple[str, ...] = ("school",),
        started_on: date | None = None,
    ) -> FlipFeel:
        session = FlipFeel(
            user_id=user_id,
            started_at=at(started_on or finished_on or date(2025, 1, 1), hour=9),
            finished_at=at(finished_on) if finished_on else None,
        )
        self.db.add(session)
        self.db.flush()
        for category in categories:
            question, choice = self._question(category)
            self.db.add(FlipFeelResponse(
                flip_feel_id=session.flip_feel_id,
                question_id=question.question_id,
                choice_id=choice.choice_id,
            ))
        self.db.commit()
        return session

    def _question(self, category: str) -> tuple[FlipFeelQuestion, FlipFeelChoice]:
        text = f"How do you feel about {category}?"
        question = (
            self.db.query(FlipFeelQuestion)
            .filter(FlipFeelQuestion.question_text == text)
            .first()
        )
        if question is None:
            question = FlipFeelQuestion(question_text=text, category=category)
            question.choices.append(FlipFeelChoice(choice_text="Okay", mood_label="neutral"))
            self.db.add(question)
            self.db.flush()
        return question, question.choices[0]


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def seed(db):
    return Seeder(db)


@pytest.fixture()
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
