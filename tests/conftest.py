# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-campus-connect")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from campus_connect.core.security import create_access_token  # noqa: E402
from campus_connect.db.session import Base  # noqa: E402
from campus_connect.db.session import get_db as app_get_session  # noqa: E402
from campus_connect.main import app as fastapi_app  # noqa: E402
from campus_connect.models import Student  # noqa: E402

TEST_DB_URL = "sqlite://"

_SCHOLAR_COUNTER = count(1)


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself; pysqlite's implicit BEGIN breaks SAVEPOINT."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # pragma: no cover
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def file_engine(tmp_path: Path) -> Iterator[Engine]:
    """File-backed SQLite engine; each session gets its own connection like concurrent requests."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'campus.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits and rollbacks issued by services only touch savepoints.
    session = Session(bind=connection, join_transaction_mode="create_savepoint")

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def auth_headers_for(uid: str) -> dict[str, str]:
    """Return authorization headers carrying ``uid`` as the token subject."""
    return {"Authorization": f"Bearer {create_access_token(uid)}"}


@pytest.fixture()
def make_student(db_session: Session) -> Callable[..., Student]:
    """Return a factory persisting student profiles."""

    def _make(
        uid: str,
        *,
        name: str | None = None,
        branch: str = "CSE",
        year_of_passing: int = 2026,
        gender: str = "Female",
    ) -> Student:
        student = Student(
            uid=uid,
            scholar_number=f"SCH{next(_SCHOLAR_COUNTER):05d}",
            name=name or uid.capitalize(),
            email=f"{uid}@campus.test",
            phone_number=None,
            branch=branch,
            year_of_passing=year_of_passing,
            gender=gender,
            program_type="Undergraduate",
        )
        db_session.add(student)
        # Committed so a service rollback in the test cannot discard it.
        db_session.commit()
        return student

    return _make


@pytest.fixture()
def test_student(make_student: Callable[..., Student]) -> Student:
    """Primary student: CSE, class of 2026, female."""
    return make_student("alice", name="Alice")


@pytest.fixture()
def other_student(make_student: Callable[..., Student]) -> Student:
    """Secondary student: ECE, class of 2027, male."""
    return make_student("bob", name="Bob", branch="ECE", year_of_passing=2027, gender="Male")


@pytest.fixture()
def auth_token(test_student: Student) -> dict[str, str]:
    """Return authorization headers for the primary test student."""
    return auth_headers_for(test_student.uid)


@pytest.fixture()
def other_auth_token(other_student: Student) -> dict[str, str]:
    """Return authorization headers for the secondary test student."""
    return auth_headers_for(other_student.uid)
