"""Story Entity — in-memory aggregate root, independent of ORM and wire shapes.

Invariants:
    - id is None until the repository assigns one
    - created_at is set once by new_story() and carried unchanged by revise_story()
    - tags is always a list (None normalized to []), order preserved

Design Decisions:
    - Frozen dataclass: mutations produce new values, so the service cannot
      accidentally touch created_at on an update
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from obscura.core.domain_types import StoryId


@dataclass(frozen=True)
class Story:
    """A short authored text with tags."""
    title: str
    content: str
    author: str
    created_at: datetime
    tags: list[str] = field(default_factory=list)
    id: StoryId | None = None


def new_story(
    title: str,
    content: str,
    author: str,
    tags: list[str] | None,
    created_at: datetime,
) -> Story:
    """Build an unsaved story stamped with its creation time."""
    return Story(
        title=title,
        content=content,
        author=author,
        tags=list(tags or []),
        created_at=created_at,
    )


def revise_story(
    story: Story,
    title: str,
    content: str,
    author: str,
    tags: list[str] | None,
) -> Story:
    """Rewrite the mutable fields; id and created_at are preserved."""
    return replace(
        story, title=title, content=content, author=author, tags=list(tags or []),
    )
