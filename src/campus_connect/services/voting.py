"""Up/down voting on posts.

``apply_vote`` is the pure state machine turning a student's existing vote and
a requested action into the new vote state and counter deltas. ``cast_vote``
applies it to the database: the vote row and the post counters change in one
transaction, and the counters are computed by the database so concurrent
voters never overwrite each other.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from campus_connect.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from campus_connect.db.transaction import run_in_transaction
from campus_connect.models import Post, PostVote
from campus_connect.services.posts import require_visible

logger = logging.getLogger(__name__)


class VoteType(str, Enum):
    """Stored vote state."""

    UP = "up"
    DOWN = "down"


class VoteAction(str, Enum):
    """Action requested by the voter."""

    UP = "up"
    DOWN = "down"
    UNVOTE = "unvote"


@dataclass(frozen=True)
class VoteOutcome:
    """New vote state and the signed counter changes it implies."""

    new_vote_state: VoteType | None
    upvote_delta: int
    downvote_delta: int


@dataclass(frozen=True)
class VoteResult:
    """Committed state of a post after a vote."""

    post_id: int
    vote_state: VoteType | None
    upvotes: int
    downvotes: int


def _coerce_action(action: VoteAction | VoteType | str) -> VoteAction:
    raw = action.value if isinstance(action, Enum) else action
    try:
        return VoteAction(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown vote action: {raw!r}") from exc


def _coerce_state(state: VoteType | str | None) -> VoteType | None:
    if state is None:
        return None
    raw = state.value if isinstance(state, Enum) else state
    try:
        return VoteType(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown vote state: {raw!r}") from exc


def apply_vote(
    existing: VoteType | str | None,
    requested: VoteAction | VoteType | str,
) -> VoteOutcome:
    """Resolve a vote request against the voter's current vote.

    Repeating the current vote toggles it off, voting the other way switches
    it, and ``unvote`` always clears it.
    """
    current = _coerce_state(existing)
    action = _coerce_action(requested)

    # Retract whatever the voter had first.
    up_delta = -1 if current is VoteType.UP else 0
    down_delta = -1 if current is VoteType.DOWN else 0

    if action is VoteAction.UNVOTE or (current is not None and current.value == action.value):
        return VoteOutcome(None, up_delta, down_delta)

    new_state = VoteType(action.value)
    if new_state is VoteType.UP:
        up_delta += 1
    else:
        down_delta += 1
    return VoteOutcome(new_state, up_delta, down_delta)


def _clamped(column: ColumnElement[int], delta: int) -> ColumnElement[int]:
    """Floor ``column + delta`` at zero inside the UPDATE."""
    shifted = column + delta
    return case((shifted < 0, 0), else_=shifted)


def apply_counter_deltas(db: Session, post_id: int, outcome: VoteOutcome) -> None:
    """Add the outcome's deltas to the post counters inside the database.

    The new values are computed from the stored ones in the UPDATE itself,
    which is what keeps two concurrent voters from losing an update.
    """
    if not outcome.upvote_delta and not outcome.downvote_delta:
        return
    db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(
            upvotes=_clamped(Post.upvotes, outcome.upvote_delta),
            downvotes=_clamped(Post.downvotes, outcome.downvote_delta),
        )
        .execution_options(synchronize_session=False)
    )


def _vote_work(voter_uid: str, post_id: int, action: VoteAction):
    def _work(db: Session) -> VoteOutcome:
        post = db.execute(
            select(Post)
            .where(Post.id == post_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if post is None:
            raise NotFoundError("Post", post_id)
        # Hidden posts are reported as missing, counters included.
        require_visible(db, post, voter_uid)

        vote = db.execute(
            select(PostVote)
            .where(PostVote.post_id == post_id, PostVote.voter_uid == voter_uid)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        existing = _coerce_state(vote.vote_type) if vote is not None else None
        outcome = apply_vote(existing, action)

        if outcome.new_vote_state is None:
            if vote is not None:
                db.delete(vote)
        elif vote is None:
            db.add(
                PostVote(
                    post_id=post_id,
                    voter_uid=voter_uid,
                    vote_type=outcome.new_vote_state.value,
                )
            )
        else:
            vote.vote_type = outcome.new_vote_state.value

        # Surfaces a racing first vote by the same student as IntegrityError.
        db.flush()
        apply_counter_deltas(db, post_id, outcome)
        return outcome

    return _work


def cast_vote(
    db: Session,
    voter_uid: str | None,
    post_id: int,
    action: VoteAction | VoteType | str,
) -> VoteResult:
    """Apply a vote action for ``voter_uid`` on ``post_id`` atomically.

    Args:
        db: Database session.
        voter_uid: Identity of the voter; required.
        post_id: Post being voted on.
        action: ``up``, ``down`` or ``unvote``.

    Returns:
        The voter's new vote state and the post's committed counters.

    Raises:
        UnauthenticatedError: If no voter is given.
        InvalidArgumentError: If the action is unknown.
        NotFoundError: If the post does not exist or the voter may not see it.
        ConflictError: If the transaction kept conflicting.
    """
    if not voter_uid:
        raise UnauthenticatedError("Sign in to vote")
    requested = _coerce_action(action)

    outcome = run_in_transaction(
        db,
        _vote_work(voter_uid, post_id, requested),
        label=f"vote on post {post_id}",
    )

    upvotes, downvotes = db.execute(
        select(Post.upvotes, Post.downvotes).where(Post.id == post_id)
    ).one()
    logger.info(
        "Vote %s by %s on post %s -> %s (up=%d, down=%d)",
        requested.value,
        voter_uid,
        post_id,
        outcome.new_vote_state.value if outcome.new_vote_state else "none",
        upvotes,
        downvotes,
    )
    return VoteResult(
        post_id=post_id,
        vote_state=outcome.new_vote_state,
        upvotes=upvotes,
        downvotes=downvotes,
    )


def get_vote(db: Session, voter_uid: str, post_id: int) -> VoteType | None:
    """Return the voter's current vote on a post."""
    vote_type = db.execute(
        select(PostVote.vote_type).where(
            PostVote.post_id == post_id,
            PostVote.voter_uid == voter_uid,
        )
    ).scalar_one_or_none()
    return VoteType(vote_type) if vote_type is not None else None


def get_vote_statuses(
    db: Session,
    voter_uid: str | None,
    post_ids: Iterable[int],
) -> dict[int, VoteType | None]:
    """Return the voter's vote on each post; posts without a vote map to None."""
    ids = list(post_ids)
    statuses: dict[int, VoteType | None] = {post_id: None for post_id in ids}
    if not voter_uid or not ids:
        return statuses
    rows = db.execute(
        select(PostVote.post_id, PostVote.vote_type).where(
            PostVote.voter_uid == voter_uid,
            PostVote.post_id.in_(ids),
        )
    ).all()
    for post_id, vote_type in rows:
        statuses[post_id] = VoteType(vote_type)
    return statuses
