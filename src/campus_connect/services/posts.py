"""Service-level helpers for posts and favourites."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from campus_connect.core.exceptions import NotFoundError, PermissionDeniedError
from campus_connect.models import FavoritePost, Post, PostVote, Student
from campus_connect.schemas.post import PostCreate, PostUpdate
from campus_connect.services.eligibility import ViewerProfile, filter_visible, is_visible
from campus_connect.services.students import find_student, viewer_profile_for

logger = logging.getLogger(__name__)


def create_post(db: Session, author: Student, data: PostCreate) -> Post:
    """Persist a new post by ``author``.

    Raises:
        InvalidArgumentError: If the visibility rule is malformed.
    """
    rule = data.visibility.to_rule()
    post = Post(
        author_uid=author.uid,
        author_name=author.name,
        author_scholar_number=author.scholar_number,
        title=data.title,
        body=data.body,
        image_url=data.image_url,
        upvotes=0,
        downvotes=0,
    )
    post.set_visibility(rule)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post %s created by %s", post.id, author.uid)
    return post


def get_post(db: Session, post_id: int) -> Post:
    """Return a post or raise ``NotFoundError``."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post", post_id)
    return post


def require_visible(db: Session, post: Post, uid: str | None) -> Post:
    """Treat a post the caller may not see as missing, unless they wrote it."""
    if post.author_uid == uid:
        return post
    viewer = viewer_profile_for(find_student(db, uid)) if uid else None
    if not is_visible(viewer, post.visibility):
        raise NotFoundError("Post", post.id)
    return post


def get_visible_post(db: Session, post_id: int, uid: str | None) -> Post:
    return require_visible(db, get_post(db, post_id), uid)


def _owned_post(db: Session, post_id: int, uid: str) -> Post:
    post = get_post(db, post_id)
    if post.author_uid != uid:
        raise PermissionDeniedError("You can only modify your own posts")
    return post


def update_post(db: Session, post_id: int, uid: str, data: PostUpdate) -> Post:
    """Apply the author's edits. Counters are never touched here."""
    post = _owned_post(db, post_id, uid)
    changes = data.model_dump(exclude_unset=True, exclude={"visibility"})
    for field_name in ("title", "body"):
        if changes.get(field_name) is None:
            changes.pop(field_name, None)
    for field_name, value in changes.items():
        setattr(post, field_name, value)
    if data.visibility is not None:
        post.set_visibility(data.visibility.to_rule())
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int, uid: str) -> None:
    """Delete a post together with its votes and favourites."""
    post = _owned_post(db, post_id, uid)
    db.execute(delete(PostVote).where(PostVote.post_id == post_id))
    db.execute(delete(FavoritePost).where(FavoritePost.post_id == post_id))
    db.delete(post)
    db.commit()
    logger.info("Post %s deleted by %s", post_id, uid)


def list_user_posts(db: Session, uid: str, limit: int = 10) -> list[Post]:
    """Return the author's own posts, newest first; visibility does not apply."""
    return list(
        db.execute(
            select(Post)
            .where(Post.author_uid == uid)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        ).scalars()
    )


def toggle_favorite(db: Session, uid: str, post_id: int) -> bool:
    """Favourite or unfavourite a post; returns the new state."""
    get_visible_post(db, post_id, uid)
    favorite = db.get(FavoritePost, (uid, post_id))
    if favorite is not None:
        db.delete(favorite)
        db.commit()
        return False
    db.add(FavoritePost(user_uid=uid, post_id=post_id))
    db.commit()
    return True


def favorite_post_ids(db: Session, uid: str | None) -> set[int]:
    if not uid:
        return set()
    return set(
        db.execute(select(FavoritePost.post_id).where(FavoritePost.user_uid == uid)).scalars()
    )


def list_favorite_posts(db: Session, uid: str, viewer: ViewerProfile | None) -> list[Post]:
    """Return the caller's favourites they can still see, newest first."""
    posts = db.execute(
        select(Post)
        .join(FavoritePost, FavoritePost.post_id == Post.id)
        .where(FavoritePost.user_uid == uid)
        .order_by(Post.created_at.desc(), Post.id.desc())
    ).scalars()
    return filter_visible(posts, viewer)
