"""Lost-and-found board: reports, claims and handover confirmation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from campus_connect.db.time import utcnow
from campus_connect.db.transaction import run_in_transaction
from campus_connect.models import ItemClaim, LostFoundItem, Student
from campus_connect.models.lost_found import (
    KIND_FOUND,
    KIND_LOST,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from campus_connect.schemas.lost_found import LostFoundReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claimer:
    uid: str
    name: str
    scholar_number: str
    claimed_at: datetime


def _new_item(kind: str, reporter: Student, data: LostFoundReport) -> LostFoundItem:
    return LostFoundItem(
        kind=kind,
        status=STATUS_ACTIVE,
        reporter_uid=reporter.uid,
        reporter_name=reporter.name,
        reporter_scholar_number=reporter.scholar_number,
        title=data.title,
        description=data.description,
        location=data.location,
        image_url=data.image_url,
        reported_at=data.reported_at or utcnow(),
    )


def _report(db: Session, kind: str, reporter: Student, data: LostFoundReport) -> LostFoundItem:
    item = _new_item(kind, reporter, data)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("%s item %s reported by %s", kind.capitalize(), item.id, reporter.uid)
    return item


def report_lost(db: Session, reporter: Student, data: LostFoundReport) -> LostFoundItem:
    return _report(db, KIND_LOST, reporter, data)


def report_found(db: Session, reporter: Student, data: LostFoundReport) -> LostFoundItem:
    return _report(db, KIND_FOUND, reporter, data)


def get_item(db: Session, item_id: int) -> LostFoundItem:
    item = db.get(LostFoundItem, item_id)
    if item is None:
        raise NotFoundError("Item", item_id)
    return item


def _reported_item(db: Session, item_id: int, uid: str) -> LostFoundItem:
    item = get_item(db, item_id)
    if item.reporter_uid != uid:
        raise PermissionDeniedError("Only the reporter can manage this item")
    return item


def _active_found_item(db: Session, item_id: int) -> LostFoundItem:
    item = get_item(db, item_id)
    if item.kind != KIND_FOUND:
        raise InvalidArgumentError("Only found items can be claimed")
    if item.status != STATUS_ACTIVE:
        raise InvalidArgumentError("This item has already been handed over")
    return item


def report_item_as_found(db: Session, lost_item_id: int, finder: Student) -> LostFoundItem:
    """Raise a found report from someone else's lost report.

    The found report copies the lost report's description and location, and
    the lost report is closed in the same transaction.

    Raises:
        NotFoundError: If the lost report does not exist.
        InvalidArgumentError: If the item is not an active lost report.
    """

    def _work(session: Session) -> LostFoundItem:
        lost = session.execute(
            select(LostFoundItem)
            .where(LostFoundItem.id == lost_item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if lost is None:
            raise NotFoundError("Item", lost_item_id)
        if lost.kind != KIND_LOST:
            raise InvalidArgumentError("Only lost items can be reported as found")
        if lost.status != STATUS_ACTIVE:
            raise InvalidArgumentError("This lost report is already closed")

        found = LostFoundItem(
            kind=KIND_FOUND,
            status=STATUS_ACTIVE,
            reporter_uid=finder.uid,
            reporter_name=finder.name,
            reporter_scholar_number=finder.scholar_number,
            title=f"Found: {lost.title}",
            description=lost.description,
            location=lost.location,
            image_url=lost.image_url,
            reported_at=utcnow(),
            source_item_id=lost.id,
        )
        session.add(found)
        lost.status = STATUS_INACTIVE
        session.flush()
        return found

    found = run_in_transaction(db, _work, label=f"found report for item {lost_item_id}")
    logger.info("Lost item %s reported found by %s as item %s", lost_item_id, finder.uid, found.id)
    return found


def claim_item(db: Session, item_id: int, uid: str) -> None:
    """Claim a found item. Claiming twice is a no-op.

    A racing duplicate claim fails on the composite key and is retried, and
    the retry then finds the committed claim.
    """

    def _work(session: Session) -> None:
        _active_found_item(session, item_id)
        existing = session.execute(
            select(ItemClaim.claimer_uid).where(
                ItemClaim.item_id == item_id,
                ItemClaim.claimer_uid == uid,
            )
        ).scalar_one_or_none()
        if existing is not None:
            return
        session.add(ItemClaim(item_id=item_id, claimer_uid=uid))
        session.flush()

    run_in_transaction(db, _work, label=f"claim on item {item_id}")
    logger.debug("Student %s claimed item %s", uid, item_id)


def unclaim_item(db: Session, item_id: int, uid: str) -> None:
    """Withdraw a claim. Withdrawing a missing claim is a no-op."""
    item = get_item(db, item_id)
    if item.kind != KIND_FOUND:
        raise InvalidArgumentError("Only found items can be claimed")
    db.execute(delete(ItemClaim).where(ItemClaim.item_id == item_id, ItemClaim.claimer_uid == uid))
    db.commit()


def list_claimers(db: Session, item_id: int, uid: str) -> list[Claimer]:
    """Students who claimed the item, earliest first; reporter only."""
    _reported_item(db, item_id, uid)
    rows = db.execute(
        select(Student.uid, Student.name, Student.scholar_number, ItemClaim.claimed_at)
        .join(ItemClaim, ItemClaim.claimer_uid == Student.uid)
        .where(ItemClaim.item_id == item_id)
        .order_by(ItemClaim.claimed_at.asc())
    ).all()
    return [
        Claimer(uid=row.uid, name=row.name, scholar_number=row.scholar_number, claimed_at=row.claimed_at)
        for row in rows
    ]


def confirm_claim(db: Session, item_id: int, uid: str, claimer_uid: str) -> LostFoundItem:
    """Hand a found item over to one of its claimers and close it.

    Raises:
        PermissionDeniedError: If ``uid`` did not report the item.
        InvalidArgumentError: If the item is closed or ``claimer_uid`` never
            claimed it.
    """
    item = _reported_item(db, item_id, uid)
    if item.kind != KIND_FOUND or item.status != STATUS_ACTIVE:
        raise InvalidArgumentError("Only active found items can be handed over")
    if db.get(ItemClaim, (item_id, claimer_uid)) is None:
        raise InvalidArgumentError("That student has not claimed this item")

    item.status = STATUS_INACTIVE
    item.confirmed_claimer_uid = claimer_uid
    db.execute(delete(ItemClaim).where(ItemClaim.item_id == item_id))
    db.commit()
    db.refresh(item)
    logger.info("Item %s handed over to %s", item_id, claimer_uid)
    return item


def delete_item(db: Session, item_id: int, uid: str) -> None:
    item = _reported_item(db, item_id, uid)
    db.execute(delete(ItemClaim).where(ItemClaim.item_id == item_id))
    db.delete(item)
    db.commit()
    logger.info("Item %s deleted by %s", item_id, uid)


def list_user_items(db: Session, uid: str) -> list[LostFoundItem]:
    return list(
        db.execute(
            select(LostFoundItem)
            .where(LostFoundItem.reporter_uid == uid)
            .order_by(LostFoundItem.created_at.desc(), LostFoundItem.id.desc())
        ).scalars()
    )
