"""Feed composition.

Each feed fetches candidates in a stable order, drops what the viewer is not
eligible to see, and decorates the survivors with the caller's own state
(vote, favourite, registration, reaction). Decoration wraps rows in
:class:`FeedEntry`; ORM rows are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from itertools import islice
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import InvalidArgumentError
from campus_connect.core.settings import settings
from campus_connect.db.time import as_utc, utcnow
from campus_connect.models import Event, LostFoundItem, Opportunity, Post
from campus_connect.models.event import REACTION_DISLIKE, REACTION_LIKE
from campus_connect.models.lost_found import KIND_FOUND, KIND_LOST, STATUS_ACTIVE
from campus_connect.services.eligibility import ViewerProfile, filter_visible, is_visible
from campus_connect.services.events import reactions_for, registered_event_ids
from campus_connect.services.posts import favorite_post_ids
from campus_connect.services.voting import VoteType, get_vote_statuses

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PostSort(str, Enum):
    RECENT = "recent"
    POPULAR = "popular"


class EventView(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    ALL = "all"


@dataclass(frozen=True)
class FeedEntry(Generic[T]):
    """A feed item together with the caller's state on it."""

    item: T
    user_vote: VoteType | None = None
    is_favorite: bool = False
    is_registered: bool = False
    is_liked: bool = False
    is_disliked: bool = False


def page_bounds(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Clamp paging arguments to the configured page sizes."""
    size = settings.feed_page_size if limit is None else limit
    if size < 1:
        raise InvalidArgumentError("limit must be positive")
    start = offset or 0
    if start < 0:
        raise InvalidArgumentError("offset cannot be negative")
    return min(size, settings.feed_max_page_size), start


def _visible_page(rows: Iterable[T], viewer: ViewerProfile | None, limit: int, offset: int) -> list[T]:
    visible = (row for row in rows if is_visible(viewer, row.visibility))
    return list(islice(visible, offset, offset + limit))


def post_feed(
    db: Session,
    viewer: ViewerProfile | None,
    viewer_uid: str | None,
    sort: PostSort | str = PostSort.RECENT,
    limit: int | None = None,
    offset: int | None = None,
) -> list[FeedEntry[Post]]:
    """Posts the viewer may see, newest (or most upvoted) first.

    Paging applies after eligibility filtering, so a page is never short
    because of posts the viewer cannot see.
    """
    try:
        order = PostSort(sort.value if isinstance(sort, Enum) else sort)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown sort: {sort!r}") from exc
    size, start = page_bounds(limit, offset)

    query = select(Post)
    if order is PostSort.POPULAR:
        query = query.order_by(Post.upvotes.desc(), Post.created_at.desc(), Post.id.desc())
    else:
        query = query.order_by(Post.created_at.desc(), Post.id.desc())

    posts = _visible_page(db.execute(query).scalars(), viewer, size, start)
    votes = get_vote_statuses(db, viewer_uid, [post.id for post in posts])
    favorites = favorite_post_ids(db, viewer_uid)
    logger.debug("Post feed for %s: %d posts", viewer_uid or "anonymous", len(posts))
    return [
        FeedEntry(item=post, user_vote=votes.get(post.id), is_favorite=post.id in favorites)
        for post in posts
    ]


def _event_time(event: Event) -> datetime | None:
    value = event.end_time or event.start_time
    return as_utc(value) if value is not None else None


def _upcoming_anchor(event: Event, now: datetime) -> datetime | None:
    if event.start_time is not None and as_utc(event.start_time) > now:
        return as_utc(event.start_time)
    return _event_time(event)


def order_events(events: Iterable[Event], view: EventView | str, now: datetime) -> list[Event]:
    """Select and order events for one of the feed views.

    ``upcoming`` keeps events that have not finished, soonest first, with
    undated events last. ``past`` keeps finished events, most recent first.
    ``all`` keeps everything in creation order, newest first.
    """
    try:
        view = EventView(view.value if isinstance(view, Enum) else view)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown event view: {view!r}") from exc
    now = as_utc(now)
    events = list(events)

    if view is EventView.ALL:
        return sorted(events, key=lambda e: (as_utc(e.created_at), e.id), reverse=True)

    if view is EventView.PAST:
        finished = [e for e in events if (t := _event_time(e)) is not None and t < now]
        return sorted(finished, key=lambda e: (_event_time(e), e.id), reverse=True)

    dated: list[tuple[datetime, int, Event]] = []
    undated: list[Event] = []
    for event in events:
        when = _event_time(event)
        if when is None:
            undated.append(event)
        elif when >= now:
            dated.append((_upcoming_anchor(event, now), event.id, event))
    dated.sort(key=lambda entry: (entry[0], entry[1]))
    return [event for _, _, event in dated] + undated


def event_feed(
    db: Session,
    viewer: ViewerProfile | None,
    viewer_uid: str | None,
    view: EventView | str = EventView.UPCOMING,
    now: datetime | None = None,
) -> list[FeedEntry[Event]]:
    """Events the viewer may see, decorated with registration and reaction."""
    candidates = db.execute(select(Event)).scalars()
    events = order_events(filter_visible(candidates, viewer), view, now or utcnow())
    ids = [event.id for event in events]
    registered = registered_event_ids(db, viewer_uid, ids)
    reactions = reactions_for(db, viewer_uid, ids)
    return [
        FeedEntry(
            item=event,
            is_registered=event.id in registered,
            is_liked=reactions.get(event.id) == REACTION_LIKE,
            is_disliked=reactions.get(event.id) == REACTION_DISLIKE,
        )
        for event in events
    ]


def opportunity_feed(
    db: Session,
    viewer: ViewerProfile | None,
    now: datetime | None = None,
) -> list[Opportunity]:
    """Open opportunities the viewer is eligible for, closest deadline first."""
    # Compared after loading so zone-less values read back from SQLite are normalised.
    cutoff = as_utc(now or utcnow())
    candidates = db.execute(
        select(Opportunity).order_by(Opportunity.deadline.asc(), Opportunity.id.asc())
    ).scalars()
    open_ones = [o for o in candidates if as_utc(o.deadline) > cutoff]
    return filter_visible(open_ones, viewer)


def lost_found_feed(db: Session, kind: str) -> Sequence[LostFoundItem]:
    """Active items of one kind, most recently lost or found first."""
    if kind not in (KIND_LOST, KIND_FOUND):
        raise InvalidArgumentError(f"Unknown item kind: {kind!r}")
    return list(
        db.execute(
            select(LostFoundItem)
            .where(LostFoundItem.kind == kind, LostFoundItem.status == STATUS_ACTIVE)
            .order_by(LostFoundItem.reported_at.desc(), LostFoundItem.id.desc())
        ).scalars()
    )
