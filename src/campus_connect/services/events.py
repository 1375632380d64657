"""Events: organisation, registration and reactions."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from campus_connect.db.time import as_utc
from campus_connect.db.transaction import run_in_transaction
from campus_connect.models import Event, EventReaction, EventRegistration, Student
from campus_connect.models.event import REACTION_DISLIKE, REACTION_LIKE
from campus_connect.schemas.event import EventCreate, EventUpdate
from campus_connect.services.eligibility import is_visible
from campus_connect.services.students import viewer_profile_for

logger = logging.getLogger(__name__)

EVENT_LINK_LENGTH = 10


def _new_event_link() -> str:
    return secrets.token_urlsafe(EVENT_LINK_LENGTH)[:EVENT_LINK_LENGTH]


def _check_times(event: Event) -> None:
    if event.start_time and event.end_time and as_utc(event.end_time) < as_utc(event.start_time):
        raise InvalidArgumentError("Event cannot end before it starts")


def create_event(db: Session, creator: Student, data: EventCreate) -> Event:
    """Create an event with a fresh shareable link."""
    rule = data.visibility.to_rule()
    event = Event(
        creator_uid=creator.uid,
        creator_name=creator.name,
        creator_scholar_number=creator.scholar_number,
        title=data.title,
        description=data.description,
        poster_url=data.poster_url,
        location=data.location,
        start_time=data.start_time,
        end_time=data.end_time,
        event_link=_new_event_link(),
        registration_count=0,
    )
    _check_times(event)
    event.set_visibility(rule)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event %s (%s) created by %s", event.id, event.event_link, creator.uid)
    return event


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event", event_id)
    return event


def get_event_by_link(db: Session, event_link: str) -> Event:
    event = db.execute(select(Event).where(Event.event_link == event_link)).scalar_one_or_none()
    if event is None:
        raise NotFoundError("Event", event_link)
    return event


def _owned_event(db: Session, event_id: int, uid: str) -> Event:
    event = get_event(db, event_id)
    if event.creator_uid != uid:
        raise PermissionDeniedError("Only the organiser can manage this event")
    return event


def update_event(db: Session, event_id: int, uid: str, data: EventUpdate) -> Event:
    """Apply the organiser's edits.

    Registration count, creator fields, link and creation time are not
    editable through this path.
    """
    event = _owned_event(db, event_id, uid)
    changes = data.model_dump(exclude_unset=True, exclude={"visibility"})
    for field_name in ("title", "description"):
        if changes.get(field_name) is None:
            changes.pop(field_name, None)
    for field_name, value in changes.items():
        setattr(event, field_name, value)
    _check_times(event)
    if data.visibility is not None:
        event.set_visibility(data.visibility.to_rule())
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: int, uid: str) -> None:
    """Delete an event along with its registrations and reactions."""
    event = _owned_event(db, event_id, uid)
    db.execute(delete(EventRegistration).where(EventRegistration.event_id == event_id))
    db.execute(delete(EventReaction).where(EventReaction.event_id == event_id))
    db.delete(event)
    db.commit()
    logger.info("Event %s deleted by %s", event_id, uid)


def list_user_events(db: Session, uid: str) -> list[Event]:
    """Events organised by ``uid``, newest first; visibility does not apply."""
    return list(
        db.execute(
            select(Event)
            .where(Event.creator_uid == uid)
            .order_by(Event.created_at.desc(), Event.id.desc())
        ).scalars()
    )


def register_for_event(db: Session, event_id: int, student: Student) -> EventRegistration:
    """Register ``student`` for an event exactly once.

    The existence check, the insert and the counter increment share one
    transaction, and the composite key turns a racing duplicate into a retry
    that then sees the committed registration.

    Raises:
        NotFoundError: If the event does not exist.
        PermissionDeniedError: If the student is not eligible to see the event.
        AlreadyExistsError: If the student is already registered.
    """
    viewer = viewer_profile_for(student)

    def _work(session: Session) -> EventRegistration:
        event = session.execute(
            select(Event)
            .where(Event.id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if event is None:
            raise NotFoundError("Event", event_id)
        if not is_visible(viewer, event.visibility):
            raise PermissionDeniedError("You are not eligible for this event")

        existing = session.execute(
            select(EventRegistration.attendee_uid).where(
                EventRegistration.event_id == event_id,
                EventRegistration.attendee_uid == student.uid,
            )
        ).scalar_one_or_none()
        if existing is not None:
            raise AlreadyExistsError("Already registered for this event")

        registration = EventRegistration(
            event_id=event_id,
            attendee_uid=student.uid,
            scholar_number=student.scholar_number,
            name=student.name,
            email=student.email,
            phone_number=student.phone_number,
        )
        session.add(registration)
        session.flush()
        session.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(registration_count=Event.registration_count + 1)
            .execution_options(synchronize_session=False)
        )
        return registration

    registration = run_in_transaction(db, _work, label=f"registration for event {event_id}")
    logger.info("Student %s registered for event %s", student.uid, event_id)
    return registration


def is_registered(db: Session, event_id: int, uid: str | None) -> bool:
    if not uid:
        return False
    return db.get(EventRegistration, (event_id, uid)) is not None


def registered_event_ids(db: Session, uid: str | None, event_ids: Iterable[int]) -> set[int]:
    ids = list(event_ids)
    if not uid or not ids:
        return set()
    return set(
        db.execute(
            select(EventRegistration.event_id).where(
                EventRegistration.attendee_uid == uid,
                EventRegistration.event_id.in_(ids),
            )
        ).scalars()
    )


def list_registrations(db: Session, event_id: int, uid: str) -> list[EventRegistration]:
    """Registrations in the order they arrived; organiser only."""
    _owned_event(db, event_id, uid)
    return list(
        db.execute(
            select(EventRegistration)
            .where(EventRegistration.event_id == event_id)
            .order_by(EventRegistration.registered_at.asc())
        ).scalars()
    )


def reaction_counts(db: Session, event_id: int) -> tuple[int, int]:
    """Return ``(likes, dislikes)`` for an event."""
    rows = db.execute(
        select(EventReaction.reaction, func.count())
        .where(EventReaction.event_id == event_id)
        .group_by(EventReaction.reaction)
    ).all()
    counts = dict(rows)
    return counts.get(REACTION_LIKE, 0), counts.get(REACTION_DISLIKE, 0)


def reactions_for(db: Session, uid: str | None, event_ids: Iterable[int]) -> dict[int, str]:
    """Map event id to the caller's reaction for the events they reacted to."""
    ids = list(event_ids)
    if not uid or not ids:
        return {}
    rows = db.execute(
        select(EventReaction.event_id, EventReaction.reaction).where(
            EventReaction.user_uid == uid,
            EventReaction.event_id.in_(ids),
        )
    ).all()
    return dict(rows)


def react_to_event(db: Session, event_id: int, uid: str, reaction: str) -> str:
    """Like or dislike an event; a new reaction replaces the previous one."""
    if reaction not in (REACTION_LIKE, REACTION_DISLIKE):
        raise InvalidArgumentError(f"Unknown reaction: {reaction!r}")

    def _work(session: Session) -> str:
        get_event(session, event_id)
        current = session.execute(
            select(EventReaction)
            .where(EventReaction.event_id == event_id, EventReaction.user_uid == uid)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if current is None:
            session.add(EventReaction(event_id=event_id, user_uid=uid, reaction=reaction))
        else:
            current.reaction = reaction
        session.flush()
        return reaction

    return run_in_transaction(db, _work, label=f"reaction on event {event_id}")


def clear_reaction(db: Session, event_id: int, uid: str) -> None:
    get_event(db, event_id)
    db.execute(
        delete(EventReaction).where(
            EventReaction.event_id == event_id,
            EventReaction.user_uid == uid,
        )
    )
    db.commit()
