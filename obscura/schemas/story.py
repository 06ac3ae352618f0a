"""Story Schemas — request/response envelopes for the /api/stories endpoints.

Invariants:
    - StoryRequest decodes shape only: every field may be null so that blank and
      missing values reach check_story_request() and are reported per field
    - StoryResponse serializes created_at as "createdAt" (ISO-8601, no zone suffix)
    - StoryResponse accepts both "createdAt" and "created_at" on input (JSON round trip)

Design Decisions:
    - Envelopes are decoupled from the Story entity and the ORM rows; from_entity()
      is the single mapping point
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from obscura.core.story import Story


class StoryRequest(BaseModel):
    """Inbound envelope for create and update."""
    title: str | None = None
    content: str | None = None
    author: str | None = None
    tags: list[str] | None = None


class StoryResponse(BaseModel):
    """Outbound envelope including the server-assigned id and creation time."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    content: str
    author: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_entity(cls, story: Story) -> "StoryResponse":
        return cls(
            id=story.id,
            title=story.title,
            content=story.content,
            author=story.author,
            tags=list(story.tags),
            created_at=story.created_at,
        )
