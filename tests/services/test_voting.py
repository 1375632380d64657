"""Tests for the vote state machine and transactional vote casting."""

from collections.abc import Callable
from itertools import product

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from campus_connect.models import Post, PostVote, Student
from campus_connect.schemas.common import VisibilityIn
from campus_connect.schemas.post import PostCreate
from campus_connect.services.posts import create_post
from campus_connect.services.voting import (
    VoteAction,
    VoteOutcome,
    VoteType,
    apply_vote,
    cast_vote,
    get_vote,
    get_vote_statuses,
)


@pytest.fixture()
def test_post(db_session: Session, test_student: Student) -> Post:
    return create_post(db_session, test_student, PostCreate(title="Hello", body="First post"))


def _counters(db: Session, post_id: int) -> tuple[int, int]:
    return db.execute(select(Post.upvotes, Post.downvotes).where(Post.id == post_id)).one()


@pytest.mark.parametrize(
    ("existing", "requested", "expected"),
    [
        (None, "up", VoteOutcome(VoteType.UP, 1, 0)),
        (None, "down", VoteOutcome(VoteType.DOWN, 0, 1)),
        ("up", "up", VoteOutcome(None, -1, 0)),
        ("up", "down", VoteOutcome(VoteType.DOWN, -1, 1)),
        ("down", "down", VoteOutcome(None, 0, -1)),
        ("down", "up", VoteOutcome(VoteType.UP, 1, -1)),
        (None, "unvote", VoteOutcome(None, 0, 0)),
        ("up", "unvote", VoteOutcome(None, -1, 0)),
        ("down", "unvote", VoteOutcome(None, 0, -1)),
    ],
)
def test_apply_vote_transitions(existing, requested, expected) -> None:
    assert apply_vote(existing, requested) == expected


def test_switch_from_down_to_up() -> None:
    outcome = apply_vote(VoteType.DOWN, VoteAction.UP)
    assert outcome.new_vote_state is VoteType.UP
    assert (outcome.upvote_delta, outcome.downvote_delta) == (1, -1)


def test_first_downvote() -> None:
    outcome = apply_vote(None, VoteType.DOWN)
    assert outcome.new_vote_state is VoteType.DOWN
    assert (outcome.upvote_delta, outcome.downvote_delta) == (0, 1)


def test_up_then_unvote_nets_to_zero() -> None:
    first = apply_vote(None, "up")
    second = apply_vote(first.new_vote_state, "unvote")
    assert second.new_vote_state is None
    assert first.upvote_delta + second.upvote_delta == 0
    assert first.downvote_delta + second.downvote_delta == 0


def test_repeated_up_toggles_off() -> None:
    first = apply_vote(None, "up")
    second = apply_vote(first.new_vote_state, "up")
    assert second.new_vote_state is None
    assert first.upvote_delta + second.upvote_delta == 0


def test_counters_never_go_negative() -> None:
    """Deltas from any short action sequence never drive a counter below zero."""
    actions = ["up", "down", "unvote"]
    for sequence in product(actions, repeat=4):
        state, upvotes, downvotes = None, 0, 0
        for action in sequence:
            outcome = apply_vote(state, action)
            state = outcome.new_vote_state
            upvotes += outcome.upvote_delta
            downvotes += outcome.downvote_delta
            assert upvotes >= 0 and downvotes >= 0


def test_unknown_action_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        apply_vote(None, "sideways")


def test_unknown_stored_state_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        apply_vote("sideways", "up")


def test_cast_vote_updates_record_and_counters(db_session: Session, test_student, test_post) -> None:
    result = cast_vote(db_session, test_student.uid, test_post.id, "up")

    assert result.vote_state is VoteType.UP
    assert (result.upvotes, result.downvotes) == (1, 0)
    assert get_vote(db_session, test_student.uid, test_post.id) is VoteType.UP

    result = cast_vote(db_session, test_student.uid, test_post.id, "down")
    assert result.vote_state is VoteType.DOWN
    assert (result.upvotes, result.downvotes) == (0, 1)

    result = cast_vote(db_session, test_student.uid, test_post.id, "down")
    assert result.vote_state is None
    assert _counters(db_session, test_post.id) == (0, 0)
    assert get_vote(db_session, test_student.uid, test_post.id) is None


def test_cast_vote_keeps_one_record_per_voter(db_session: Session, test_student, test_post) -> None:
    for action in ("up", "down", "up", "unvote", "down"):
        cast_vote(db_session, test_student.uid, test_post.id, action)

    votes = db_session.execute(select(PostVote).where(PostVote.post_id == test_post.id)).scalars().all()
    assert len(votes) == 1
    assert votes[0].vote_type == "down"
    assert _counters(db_session, test_post.id) == (0, 1)


def test_counters_reflect_distinct_voters(
    db_session: Session,
    test_post,
    make_student: Callable[..., Student],
) -> None:
    voters = [make_student(f"voter{i}") for i in range(3)]
    for voter in voters:
        cast_vote(db_session, voter.uid, test_post.id, "up")
    cast_vote(db_session, voters[0].uid, test_post.id, "down")

    assert _counters(db_session, test_post.id) == (2, 1)


def test_cast_vote_clamps_inconsistent_counters(db_session: Session, test_student, test_post) -> None:
    """A retraction against an already-zero counter floors at zero."""
    cast_vote(db_session, test_student.uid, test_post.id, "up")
    test_post.upvotes = 0
    db_session.commit()

    result = cast_vote(db_session, test_student.uid, test_post.id, "unvote")

    assert result.upvotes == 0


def test_vote_on_missing_post(db_session: Session, test_student) -> None:
    with pytest.raises(NotFoundError):
        cast_vote(db_session, test_student.uid, 9999, "up")
    assert db_session.execute(select(PostVote)).first() is None


def test_vote_requires_identity(db_session: Session, test_post) -> None:
    with pytest.raises(UnauthenticatedError):
        cast_vote(db_session, None, test_post.id, "up")
    with pytest.raises(UnauthenticatedError):
        cast_vote(db_session, "", test_post.id, "up")


def test_vote_rejects_unknown_action(db_session: Session, test_student, test_post) -> None:
    with pytest.raises(InvalidArgumentError):
        cast_vote(db_session, test_student.uid, test_post.id, "meh")


def test_get_vote_statuses(db_session: Session, test_student, test_post) -> None:
    other = create_post(db_session, test_student, PostCreate(title="Second", body="Another"))
    cast_vote(db_session, test_student.uid, other.id, "down")

    statuses = get_vote_statuses(db_session, test_student.uid, [test_post.id, other.id])

    assert statuses == {test_post.id: None, other.id: VoteType.DOWN}
    assert get_vote_statuses(db_session, None, [test_post.id]) == {test_post.id: None}


def test_vote_on_post_hidden_from_voter(
    db_session: Session,
    test_student,
    other_student,
) -> None:
    post = create_post(
        db_session,
        test_student,
        PostCreate(title="Final years", body="Farewell", visibility=VisibilityIn(graduation_years=[2026])),
    )

    with pytest.raises(NotFoundError):
        cast_vote(db_session, other_student.uid, post.id, "up")

    assert _counters(db_session, post.id) == (0, 0)
    assert db_session.execute(select(PostVote)).first() is None
    assert cast_vote(db_session, test_student.uid, post.id, "up").upvotes == 1
