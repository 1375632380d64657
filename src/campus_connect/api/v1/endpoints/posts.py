"""Post-related endpoints for the Campus Connect API."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from campus_connect.core.exceptions import NotFoundError
from campus_connect.models import Post
from campus_connect.schemas.post import (
    FavoriteToggleResponse,
    FeedPostResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from campus_connect.services import posts as post_service
from campus_connect.services.eligibility import is_visible
from campus_connect.services.feed import FeedEntry, PostSort, post_feed
from campus_connect.services.students import viewer_profile_for
from campus_connect.services.voting import get_vote

from ..dependencies import CurrentUserDep, SessionDep, ViewerDep

router = APIRouter(prefix="/posts", tags=["posts"])


def _feed_response(entry: FeedEntry[Post]) -> FeedPostResponse:
    response = FeedPostResponse.model_validate(entry.item)
    return response.model_copy(
        update={
            "user_vote": entry.user_vote.value if entry.user_vote else None,
            "is_favorite": entry.is_favorite,
        }
    )


@router.get("/", response_model=list[FeedPostResponse])
def list_posts(
    db: SessionDep,
    viewer: ViewerDep,
    sort: PostSort = PostSort.RECENT,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[FeedPostResponse]:
    """Return the post feed for the caller.

    Anonymous callers only see posts without eligibility restrictions.
    """
    entries = post_feed(db, viewer.profile, viewer.uid, sort=sort, limit=limit, offset=offset)
    return [_feed_response(entry) for entry in entries]


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(post_data: PostCreate, current_user: CurrentUserDep, db: SessionDep) -> PostResponse:
    post = post_service.create_post(db, current_user, post_data)
    return PostResponse.model_validate(post)


@router.get("/favorites", response_model=list[PostResponse])
def list_favorites(current_user: CurrentUserDep, db: SessionDep) -> list[PostResponse]:
    """Favourited posts the caller is still eligible to see."""
    posts = post_service.list_favorite_posts(db, current_user.uid, viewer_profile_for(current_user))
    return [PostResponse.model_validate(post) for post in posts]


@router.get("/mine", response_model=list[PostResponse])
def list_my_posts(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[PostResponse]:
    posts = post_service.list_user_posts(db, current_user.uid, limit=limit)
    return [PostResponse.model_validate(post) for post in posts]


@router.get("/{post_id}", response_model=FeedPostResponse)
def get_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> FeedPostResponse:
    """Return a single post; posts the caller may not see are reported as missing."""
    post = post_service.get_post(db, post_id)
    if post.author_uid != viewer.uid and not is_visible(viewer.profile, post.visibility):
        raise NotFoundError("Post", post_id)
    entry = FeedEntry(
        item=post,
        user_vote=get_vote(db, viewer.uid, post_id) if viewer.uid else None,
        is_favorite=post_id in post_service.favorite_post_ids(db, viewer.uid),
    )
    return _feed_response(entry)


@router.patch("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    post = post_service.update_post(db, post_id, current_user.uid, post_data)
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    post_service.delete_post(db, post_id, current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> FavoriteToggleResponse:
    """Favourite a post, or unfavourite it if it already is one."""
    is_favorite = post_service.toggle_favorite(db, current_user.uid, post_id)
    return FavoriteToggleResponse(post_id=post_id, is_favorite=is_favorite)
