"""create story schema

Revision ID: 001_create_story_schema
Revises: None
Create Date: 2025-11-02

Creates story and story_tags. Tags cascade on story deletion at the database
level; the repository never deletes tag rows itself.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_story_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# BIGSERIAL on PostgreSQL; INTEGER PRIMARY KEY AUTOINCREMENT on SQLite
_story_id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "story",
        sa.Column("id", _story_id_type, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("author", sa.String, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.CheckConstraint(
            "length(trim(title)) > 0", name="ck_story_title_not_blank",
        ),
        sa.CheckConstraint(
            "length(trim(content)) > 0", name="ck_story_content_not_blank",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_story_created_at", "story", ["created_at"])
    op.create_index("ix_story_author", "story", ["author"])

    op.create_table(
        "story_tags",
        sa.Column(
            "story_id", _story_id_type,
            sa.ForeignKey("story.id", ondelete="CASCADE"),
            primary_key=True, nullable=False,
        ),
        sa.Column("tags_order", sa.Integer, primary_key=True, nullable=False),
        sa.Column("tags", sa.String, nullable=True),
    )
    op.create_index("ix_story_tags_story_id", "story_tags", ["story_id"])


def downgrade() -> None:
    op.drop_index("ix_story_tags_story_id", table_name="story_tags")
    op.drop_table("story_tags")
    op.drop_index("ix_story_author", table_name="story")
    op.drop_index("ix_story_created_at", table_name="story")
    op.drop_table("story")
