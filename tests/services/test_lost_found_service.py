"""Tests for lost-and-found reports, claims and handover."""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import InvalidArgumentError, PermissionDeniedError
from campus_connect.models import ItemClaim, LostFoundItem, Student
from campus_connect.schemas.lost_found import LostFoundReport
from campus_connect.services import lost_found as lost_found_service
from campus_connect.services.feed import lost_found_feed


@pytest.fixture()
def lost_item(db_session: Session, test_student) -> LostFoundItem:
    return lost_found_service.report_lost(
        db_session,
        test_student,
        LostFoundReport(title="Blue water bottle", description="Steel, dented", location="Library"),
    )


@pytest.fixture()
def found_item(db_session: Session, other_student) -> LostFoundItem:
    return lost_found_service.report_found(
        db_session,
        other_student,
        LostFoundReport(title="ID card", location="Canteen"),
    )


def test_report_found_from_lost_closes_the_lost_report(
    db_session: Session,
    other_student,
    lost_item,
) -> None:
    found = lost_found_service.report_item_as_found(db_session, lost_item.id, other_student)

    assert found.kind == "found"
    assert found.title == "Found: Blue water bottle"
    assert found.description == "Steel, dented"
    assert found.location == "Library"
    assert found.reporter_uid == other_student.uid
    assert found.source_item_id == lost_item.id

    db_session.refresh(lost_item)
    assert lost_item.status == "inactive"
    assert lost_item.id not in {item.id for item in lost_found_feed(db_session, "lost")}
    assert found.id in {item.id for item in lost_found_feed(db_session, "found")}


def test_closed_lost_report_cannot_be_found_twice(db_session: Session, other_student, lost_item) -> None:
    lost_found_service.report_item_as_found(db_session, lost_item.id, other_student)
    with pytest.raises(InvalidArgumentError):
        lost_found_service.report_item_as_found(db_session, lost_item.id, other_student)


def test_found_report_cannot_be_reported_found(db_session: Session, test_student, found_item) -> None:
    with pytest.raises(InvalidArgumentError):
        lost_found_service.report_item_as_found(db_session, found_item.id, test_student)


def test_claims_are_idempotent(db_session: Session, test_student, other_student, found_item) -> None:
    lost_found_service.claim_item(db_session, found_item.id, test_student.uid)
    lost_found_service.claim_item(db_session, found_item.id, test_student.uid)

    claimers = lost_found_service.list_claimers(db_session, found_item.id, other_student.uid)
    assert [c.uid for c in claimers] == [test_student.uid]
    assert claimers[0].name == "Alice"

    lost_found_service.unclaim_item(db_session, found_item.id, test_student.uid)
    lost_found_service.unclaim_item(db_session, found_item.id, test_student.uid)
    assert lost_found_service.list_claimers(db_session, found_item.id, other_student.uid) == []


def test_lost_items_cannot_be_claimed(db_session: Session, other_student, lost_item) -> None:
    with pytest.raises(InvalidArgumentError):
        lost_found_service.claim_item(db_session, lost_item.id, other_student.uid)


def test_only_reporter_sees_claimers(db_session: Session, test_student, found_item) -> None:
    with pytest.raises(PermissionDeniedError):
        lost_found_service.list_claimers(db_session, found_item.id, test_student.uid)


def test_confirm_claim_hands_item_over(
    db_session: Session,
    test_student,
    other_student,
    found_item,
    make_student,
) -> None:
    rival = make_student("carol")
    lost_found_service.claim_item(db_session, found_item.id, test_student.uid)
    lost_found_service.claim_item(db_session, found_item.id, rival.uid)

    item = lost_found_service.confirm_claim(db_session, found_item.id, other_student.uid, test_student.uid)

    assert item.status == "inactive"
    assert item.confirmed_claimer_uid == test_student.uid
    assert db_session.execute(select(ItemClaim)).first() is None
    assert lost_found_feed(db_session, "found") == []


def test_confirm_requires_reporter_and_existing_claim(
    db_session: Session,
    test_student,
    other_student,
    found_item,
) -> None:
    with pytest.raises(InvalidArgumentError):
        lost_found_service.confirm_claim(db_session, found_item.id, other_student.uid, test_student.uid)

    lost_found_service.claim_item(db_session, found_item.id, test_student.uid)
    with pytest.raises(PermissionDeniedError):
        lost_found_service.confirm_claim(db_session, found_item.id, test_student.uid, test_student.uid)


def test_delete_item(db_session: Session, test_student, other_student, found_item) -> None:
    item_id = found_item.id
    lost_found_service.claim_item(db_session, item_id, test_student.uid)

    with pytest.raises(PermissionDeniedError):
        lost_found_service.delete_item(db_session, item_id, test_student.uid)
    lost_found_service.delete_item(db_session, item_id, other_student.uid)

    assert db_session.get(LostFoundItem, item_id) is None
    assert db_session.execute(select(ItemClaim)).first() is None


def test_simultaneous_claims_by_one_student(file_engine: Engine) -> None:
    """Racing duplicate claims settle on a single claim instead of failing."""
    with Session(file_engine) as session:
        finder = Student(uid="finder", scholar_number="F0001", name="Finder")
        session.add_all([finder, Student(uid="owner", scholar_number="F0002", name="Owner")])
        session.commit()
        item_id = lost_found_service.report_found(session, finder, LostFoundReport(title="Keys")).id

    for _ in range(5):
        barrier = Barrier(2)

        def _claim(_: int) -> None:
            with Session(file_engine) as session:
                barrier.wait()
                lost_found_service.claim_item(session, item_id, "owner")

        with ThreadPoolExecutor(max_workers=2) as pool:
            list(pool.map(_claim, range(2)))

        with Session(file_engine) as session:
            claims = session.execute(select(ItemClaim).where(ItemClaim.item_id == item_id)).scalars().all()
            assert [claim.claimer_uid for claim in claims] == ["owner"]
            lost_found_service.unclaim_item(session, item_id, "owner")
