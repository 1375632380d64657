"""Event endpoints: organisation, shareable links, registration and reactions."""

from fastapi import APIRouter, Response, status
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import NotFoundError
from campus_connect.models import Event
from campus_connect.models.event import REACTION_DISLIKE, REACTION_LIKE
from campus_connect.schemas.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    FeedEventResponse,
    ReactionRequest,
    ReactionResponse,
    RegistrationResponse,
    RegistrationStatus,
)
from campus_connect.services import events as event_service
from campus_connect.services.eligibility import is_visible
from campus_connect.services.feed import EventView, FeedEntry, event_feed

from ..dependencies import CurrentUidDep, CurrentUserDep, SessionDep, Viewer, ViewerDep

router = APIRouter(prefix="/events", tags=["events"])


def _feed_response(entry: FeedEntry[Event]) -> FeedEventResponse:
    response = FeedEventResponse.model_validate(entry.item)
    return response.model_copy(
        update={
            "is_registered": entry.is_registered,
            "is_liked": entry.is_liked,
            "is_disliked": entry.is_disliked,
        }
    )


def _decorated(db: Session, event: Event, viewer: Viewer) -> FeedEventResponse:
    if event.creator_uid != viewer.uid and not is_visible(viewer.profile, event.visibility):
        raise NotFoundError("Event", event.id)
    reaction = event_service.reactions_for(db, viewer.uid, [event.id]).get(event.id)
    return _feed_response(
        FeedEntry(
            item=event,
            is_registered=event_service.is_registered(db, event.id, viewer.uid),
            is_liked=reaction == REACTION_LIKE,
            is_disliked=reaction == REACTION_DISLIKE,
        )
    )


def _reaction_response(db: Session, event_id: int, reaction: str | None) -> ReactionResponse:
    likes, dislikes = event_service.reaction_counts(db, event_id)
    return ReactionResponse(event_id=event_id, reaction=reaction, likes=likes, dislikes=dislikes)


@router.get("/", response_model=list[FeedEventResponse])
def list_events(
    db: SessionDep,
    viewer: ViewerDep,
    view: EventView = EventView.UPCOMING,
) -> list[FeedEventResponse]:
    """Return the event feed: ``upcoming`` (default), ``past`` or ``all``."""
    entries = event_feed(db, viewer.profile, viewer.uid, view=view)
    return [_feed_response(entry) for entry in entries]


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(event_data: EventCreate, current_user: CurrentUserDep, db: SessionDep) -> EventResponse:
    event = event_service.create_event(db, current_user, event_data)
    return EventResponse.model_validate(event)


@router.get("/mine", response_model=list[EventResponse])
def list_my_events(current_user: CurrentUserDep, db: SessionDep) -> list[EventResponse]:
    return [EventResponse.model_validate(e) for e in event_service.list_user_events(db, current_user.uid)]


@router.get("/link/{event_link}", response_model=FeedEventResponse)
def get_event_by_link(event_link: str, db: SessionDep, viewer: ViewerDep) -> FeedEventResponse:
    """Resolve a shareable event link."""
    return _decorated(db, event_service.get_event_by_link(db, event_link), viewer)


@router.get("/{event_id}", response_model=FeedEventResponse)
def get_event(event_id: int, db: SessionDep, viewer: ViewerDep) -> FeedEventResponse:
    return _decorated(db, event_service.get_event(db, event_id), viewer)


@router.patch("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    event_data: EventUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EventResponse:
    event = event_service.update_event(db, event_id, current_user.uid, event_data)
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    event_service.delete_event(db, event_id, current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(event_id: int, current_user: CurrentUserDep, db: SessionDep) -> RegistrationResponse:
    """Register the caller for an event; registering twice is a conflict."""
    registration = event_service.register_for_event(db, event_id, current_user)
    return RegistrationResponse.model_validate(registration)


@router.get("/{event_id}/registrations", response_model=list[RegistrationResponse])
def list_registrations(
    event_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[RegistrationResponse]:
    """Organiser-only list of registrations in arrival order."""
    registrations = event_service.list_registrations(db, event_id, current_user.uid)
    return [RegistrationResponse.model_validate(r) for r in registrations]


@router.get("/{event_id}/registration-status", response_model=RegistrationStatus)
def registration_status(event_id: int, uid: CurrentUidDep, db: SessionDep) -> RegistrationStatus:
    event_service.get_event(db, event_id)
    return RegistrationStatus(
        event_id=event_id,
        is_registered=event_service.is_registered(db, event_id, uid),
    )


@router.post("/{event_id}/reaction", response_model=ReactionResponse)
def react(
    event_id: int,
    reaction_data: ReactionRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReactionResponse:
    """Like or dislike an event, replacing any earlier reaction."""
    reaction = event_service.react_to_event(db, event_id, current_user.uid, reaction_data.reaction)
    return _reaction_response(db, event_id, reaction)


@router.delete("/{event_id}/reaction", response_model=ReactionResponse)
def remove_reaction(event_id: int, current_user: CurrentUserDep, db: SessionDep) -> ReactionResponse:
    event_service.clear_reaction(db, event_id, current_user.uid)
    return _reaction_response(db, event_id, None)
