"""Job and internship postings."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import InvalidArgumentError, NotFoundError, PermissionDeniedError
from campus_connect.db.time import as_utc, utcnow
from campus_connect.models import Opportunity, Student
from campus_connect.schemas.opportunity import OpportunityCreate, OpportunityUpdate

logger = logging.getLogger(__name__)


def _require_future(deadline: datetime, now: datetime | None = None) -> datetime:
    deadline = as_utc(deadline)
    if deadline <= as_utc(now or utcnow()):
        raise InvalidArgumentError("Deadline must be in the future")
    return deadline


def create_opportunity(
    db: Session,
    poster: Student,
    data: OpportunityCreate,
    now: datetime | None = None,
) -> Opportunity:
    """Post an opportunity whose eligibility rule gates the feed.

    Raises:
        InvalidArgumentError: If the deadline has already passed or the
            eligibility rule is malformed.
    """
    deadline = _require_future(data.deadline, now)
    rule = data.eligibility.to_rule()
    opportunity = Opportunity(
        poster_uid=poster.uid,
        poster_name=poster.name,
        poster_scholar_number=poster.scholar_number,
        title=data.title,
        description=data.description,
        apply_link=data.apply_link,
        deadline=deadline,
    )
    opportunity.set_visibility(rule)
    db.add(opportunity)
    db.commit()
    db.refresh(opportunity)
    logger.info("Opportunity %s posted by %s", opportunity.id, poster.uid)
    return opportunity


def get_opportunity(db: Session, opportunity_id: int) -> Opportunity:
    opportunity = db.get(Opportunity, opportunity_id)
    if opportunity is None:
        raise NotFoundError("Opportunity", opportunity_id)
    return opportunity


def _owned_opportunity(db: Session, opportunity_id: int, uid: str) -> Opportunity:
    opportunity = get_opportunity(db, opportunity_id)
    if opportunity.poster_uid != uid:
        raise PermissionDeniedError("Only the poster can manage this opportunity")
    return opportunity


def update_opportunity(
    db: Session,
    opportunity_id: int,
    uid: str,
    data: OpportunityUpdate,
    now: datetime | None = None,
) -> Opportunity:
    opportunity = _owned_opportunity(db, opportunity_id, uid)
    changes = data.model_dump(exclude_unset=True, exclude={"eligibility"})
    for field_name in ("title", "description", "apply_link", "deadline"):
        if changes.get(field_name) is None:
            changes.pop(field_name, None)
    if "deadline" in changes:
        changes["deadline"] = _require_future(changes["deadline"], now)
    for field_name, value in changes.items():
        setattr(opportunity, field_name, value)
    if data.eligibility is not None:
        opportunity.set_visibility(data.eligibility.to_rule())
    db.commit()
    db.refresh(opportunity)
    return opportunity


def delete_opportunity(db: Session, opportunity_id: int, uid: str) -> None:
    opportunity = _owned_opportunity(db, opportunity_id, uid)
    db.delete(opportunity)
    db.commit()
    logger.info("Opportunity %s deleted by %s", opportunity_id, uid)


def list_user_opportunities(db: Session, uid: str) -> list[Opportunity]:
    """Everything ``uid`` has posted, expired ones included, newest first."""
    return list(
        db.execute(
            select(Opportunity)
            .where(Opportunity.poster_uid == uid)
            .order_by(Opportunity.created_at.desc(), Opportunity.id.desc())
        ).scalars()
    )
