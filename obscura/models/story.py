"""Story ORM — persists the story aggregate and its ordered tag list.

Invariants:
    - story column set is exactly {id, title, content, author, created_at}
    - title/content non-blank enforced by CHECK constraints, not only by the API
    - story_tags rows reference story.id with ON DELETE CASCADE
    - tags_order preserves list order; (story_id, tags_order) is the primary key

Design Decisions:
    - No ORM relationship between the two tables: the repository maps rows
      explicitly and deletes rely on the database cascade
    - BigInteger id falls back to INTEGER on SQLite so AUTOINCREMENT applies
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer,
    String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from obscura.core.domain_types import TITLE_MAX_LENGTH
from obscura.db.base import Base

StoryIdType = BigInteger().with_variant(Integer(), "sqlite")


class StoryRecord(Base):
    """Row in the story table."""
    __tablename__ = "story"
    __table_args__ = (
        CheckConstraint(
            "length(trim(title)) > 0", name="ck_story_title_not_blank",
        ),
        CheckConstraint(
            "length(trim(content)) > 0", name="ck_story_content_not_blank",
        ),
        Index("ix_story_created_at", "created_at"),
        Index("ix_story_author", "author"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        StoryIdType, primary_key=True, autoincrement=True,
    )
    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH), nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class StoryTagRecord(Base):
    """Row in the story_tags child table."""
    __tablename__ = "story_tags"
    __table_args__ = (
        Index("ix_story_tags_story_id", "story_id"),
    )

    story_id: Mapped[int] = mapped_column(
        StoryIdType,
        ForeignKey("story.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    tags_order: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False,
    )
    tags: Mapped[str | None] = mapped_column(String, nullable=True)
