"""initial schema

Revision ID: 5c1d7e2a9b40
Revises:
Create Date: 2026-10-18 09:12:41.508213

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1d7e2a9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _visibility_columns() -> list[sa.Column]:
    return [
        sa.Column("visible_branches", sa.JSON(), nullable=False),
        sa.Column("visible_years", sa.JSON(), nullable=False),
        sa.Column("visible_genders", sa.JSON(), nullable=False),
    ]


def upgrade() -> None:
    """Create student, content and per-user tables."""
    op.create_table(
        "student",
        sa.Column("uid", sa.String(length=128), nullable=False),
        sa.Column("scholar_number", sa.String(length=32), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.Text(), nullable=True),
        sa.Column("branch", sa.String(length=16), nullable=False),
        sa.Column("year_of_passing", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(length=16), nullable=False),
        sa.Column("program_type", sa.String(length=16), nullable=False),
        sa.Column("resume_url", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("uid"),
        sa.UniqueConstraint("scholar_number"),
    )

    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_uid", sa.String(length=128), nullable=False),
        sa.Column("author_name", sa.Text(), nullable=False),
        sa.Column("author_scholar_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        *_visibility_columns(),
        sa.CheckConstraint("upvotes >= 0", name="ck_post_upvotes_nonneg"),
        sa.CheckConstraint("downvotes >= 0", name="ck_post_downvotes_nonneg"),
        sa.ForeignKeyConstraint(["author_uid"], ["student.uid"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_created_at", "post", ["created_at"])
    op.create_index("ix_post_author_uid", "post", ["author_uid"])

    op.create_table(
        "favorite_post",
        sa.Column("user_uid", sa.String(length=128), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_uid"], ["student.uid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_uid", "post_id"),
    )

    op.create_table(
        "post_vote",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("voter_uid", sa.String(length=128), nullable=False),
        sa.Column("vote_type", sa.String(length=8), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("vote_type IN ('up', 'down')", name="ck_post_vote_type"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["voter_uid"], ["student.uid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "voter_uid"),
    )
    op.create_index("ix_post_vote_post_id", "post_vote", ["post_id"])

    op.create_table(
        "event",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("creator_uid", sa.String(length=128), nullable=False),
        sa.Column("creator_name", sa.Text(), nullable=False),
        sa.Column("creator_scholar_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("poster_url", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("event_link", sa.String(length=16), nullable=False),
        sa.Column("registration_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        *_visibility_columns(),
        sa.CheckConstraint(
            "registration_count >= 0", name="ck_event_registration_count_nonneg"
        ),
        sa.ForeignKeyConstraint(["creator_uid"], ["student.uid"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_link"),
    )
    op.create_index("ix_event_created_at", "event", ["created_at"])
    op.create_index("ix_event_creator_uid", "event", ["creator_uid"])

    op.create_table(
        "event_registration",
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("attendee_uid", sa.String(length=128), nullable=False),
        sa.Column("scholar_number", sa.String(length=32), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.Text(), nullable=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["event.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["attendee_uid"], ["student.uid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("event_id", "attendee_uid"),
    )

    op.create_table(
        "event_reaction",
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("user_uid", sa.String(length=128), nullable=False),
        sa.Column("reaction", sa.String(length=8), nullable=False),
        sa.CheckConstraint("reaction IN ('like', 'dislike')", name="ck_event_reaction_kind"),
        sa.ForeignKeyConstraint(["event_id"], ["event.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_uid"], ["student.uid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("event_id", "user_uid"),
    )

    op.create_table(
        "opportunity",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("poster_uid", sa.String(length=128), nullable=False),
        sa.Column("poster_name", sa.Text(), nullable=False),
        sa.Column("poster_scholar_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("apply_link", sa.Text(), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        *_visibility_columns(),
        sa.ForeignKeyConstraint(["poster_uid"], ["student.uid"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_opportunity_deadline", "opportunity", ["deadline"])
    op.create_index("ix_opportunity_poster_uid", "opportunity", ["poster_uid"])

    op.create_table(
        "lost_found_item",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=8), nullable=False),
        sa.Column("status", sa.String(length=8), nullable=False),
        sa.Column("reporter_uid", sa.String(length=128), nullable=False),
        sa.Column("reporter_name", sa.Text(), nullable=False),
        sa.Column("reporter_scholar_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("confirmed_claimer_uid", sa.String(length=128), nullable=True),
        sa.Column("source_item_id", sa.Integer(), nullable=True),
        sa.CheckConstraint("kind IN ('lost', 'found')", name="ck_lost_found_kind"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="ck_lost_found_status"),
        sa.ForeignKeyConstraint(["reporter_uid"], ["student.uid"]),
        sa.ForeignKeyConstraint(
            ["source_item_id"], ["lost_found_item.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lost_found_kind_status", "lost_found_item", ["kind", "status"])
    op.create_index("ix_lost_found_item_reporter_uid", "lost_found_item", ["reporter_uid"])

    op.create_table(
        "item_claim",
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("claimer_uid", sa.String(length=128), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["item_id"], ["lost_found_item.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["claimer_uid"], ["student.uid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("item_id", "claimer_uid"),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("item_claim")
    op.drop_index("ix_lost_found_item_reporter_uid", table_name="lost_found_item")
    op.drop_index("ix_lost_found_kind_status", table_name="lost_found_item")
    op.drop_table("lost_found_item")
    op.drop_index("ix_opportunity_poster_uid", table_name="opportunity")
    op.drop_index("ix_opportunity_deadline", table_name="opportunity")
    op.drop_table("opportunity")
    op.drop_table("event_reaction")
    op.drop_table("event_registration")
    op.drop_index("ix_event_creator_uid", table_name="event")
    op.drop_index("ix_event_created_at", table_name="event")
    op.drop_table("event")
    op.drop_index("ix_post_vote_post_id", table_name="post_vote")
    op.drop_table("post_vote")
    op.drop_table("favorite_post")
    op.drop_index("ix_post_author_uid", table_name="post")
    op.drop_index("ix_post_created_at", table_name="post")
    op.drop_table("post")
    op.drop_table("student")
