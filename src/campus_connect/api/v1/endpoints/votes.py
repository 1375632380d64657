"""Vote-related endpoints for the Campus Connect API."""

from fastapi import APIRouter

from campus_connect.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from campus_connect.services.posts import get_visible_post
from campus_connect.services.voting import cast_vote, get_vote

from ..dependencies import CurrentUidDep, CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse)
def vote_on_post(vote_data: VoteCreate, current_user: CurrentUserDep, db: SessionDep) -> VoteResponse:
    """Cast, switch or withdraw the caller's vote on a post.

    Args:
        vote_data: Post id and the requested action
        current_user: Authenticated student
        db: Database session

    Returns:
        The caller's new vote and the post's committed counters
    """
    result = cast_vote(db, current_user.uid, vote_data.post_id, vote_data.action)
    return VoteResponse(
        post_id=result.post_id,
        vote=result.vote_state.value if result.vote_state else None,
        upvotes=result.upvotes,
        downvotes=result.downvotes,
    )


@router.get("/{post_id}/my-vote", response_model=MyVoteResponse)
def get_my_vote(post_id: int, uid: CurrentUidDep, db: SessionDep) -> MyVoteResponse:
    get_visible_post(db, post_id, uid)
    vote = get_vote(db, uid, post_id)
    return MyVoteResponse(post_id=post_id, vote=vote.value if vote else None)
