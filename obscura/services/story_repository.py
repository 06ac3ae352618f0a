"""Story Repository — persistence facade mapping story rows to the Story entity.

Invariants:
    - Operates inside the caller's transaction; never commits or rolls back
    - save() on an unsaved story returns a copy with the database-generated id
    - save() on a saved story never writes created_at and rewrites tags
      delete-then-insert in list order
    - Tags are always read back ordered by tags_order
    - delete_by_id() relies on ON DELETE CASCADE, never deletes tag rows itself

Design Decisions:
    - Explicit row mapping instead of an ORM relationship: the child table has no
      identity of its own and the cascade belongs to the database
"""

from dataclasses import replace

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from obscura.core.domain_types import StoryId
from obscura.core.story import Story
from obscura.models.story import StoryRecord, StoryTagRecord


class StoryRepository:
    """Async repository over the story and story_tags tables."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_all(self) -> list[Story]:
        result = await self._session.execute(
            select(StoryRecord).order_by(StoryRecord.id),
        )
        records = result.scalars().all()
        tags_by_story = await self._load_tags([r.id for r in records])
        return [
            _to_entity(record, tags_by_story.get(record.id, []))
            for record in records
        ]

    async def find_by_id(
        self, story_id: StoryId, for_update: bool = False,
    ) -> Story | None:
        query = select(StoryRecord).where(StoryRecord.id == story_id)
        if for_update:
            query = query.with_for_update()
        result = await self._session.execute(query)
        record = result.scalar_one_or_none()
        if record is None:
            return None
        tags_by_story = await self._load_tags([record.id])
        return _to_entity(record, tags_by_story.get(record.id, []))

    async def exists_by_id(self, story_id: StoryId) -> bool:
        result = await self._session.execute(
            select(StoryRecord.id).where(StoryRecord.id == story_id),
        )
        return result.scalar_one_or_none() is not None

    async def save(self, story: Story) -> Story:
        """Insert when id is unset, otherwise update in place."""
        if story.id is None:
            return await self._insert(story)
        return await self._update(story)

    async def delete_by_id(self, story_id: StoryId) -> None:
        await self._session.execute(
            delete(StoryRecord).where(StoryRecord.id == story_id),
        )

    async def delete_all(self) -> None:
        await self._session.execute(delete(StoryRecord))

    async def count(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(StoryRecord),
        )
        return result.scalar_one()

    # ─── Row mapping ────────────────────────────────────────────

    async def _insert(self, story: Story) -> Story:
        record = StoryRecord(
            title=story.title,
            content=story.content,
            author=story.author,
            created_at=story.created_at,
        )
        self._session.add(record)
        await self._session.flush()
        await self._insert_tags(record.id, story.tags)
        return replace(story, id=StoryId(record.id), tags=list(story.tags))

    async def _update(self, story: Story) -> Story:
        await self._session.execute(
            update(StoryRecord)
            .where(StoryRecord.id == story.id)
            .values(
                title=story.title,
                content=story.content,
                author=story.author,
            ),
        )
        await self._session.execute(
            delete(StoryTagRecord).where(StoryTagRecord.story_id == story.id),
        )
        await self._insert_tags(story.id, story.tags)
        return replace(story, tags=list(story.tags))

    async def _insert_tags(self, story_id: int, tags: list[str]) -> None:
        if not tags:
            return
        await self._session.execute(
            insert(StoryTagRecord),
            [
                {"story_id": story_id, "tags_order": position, "tags": tag}
                for position, tag in enumerate(tags)
            ],
        )

    async def _load_tags(self, story_ids: list[int]) -> dict[int, list[str]]:
        if not story_ids:
            return {}
        result = await self._session.execute(
            select(StoryTagRecord.story_id, StoryTagRecord.tags)
            .where(StoryTagRecord.story_id.in_(story_ids))
            .order_by(StoryTagRecord.story_id, StoryTagRecord.tags_order),
        )
        tags_by_story: dict[int, list[str]] = {}
        for story_id, tag in result.all():
            tags_by_story.setdefault(story_id, []).append(tag)
        return tags_by_story


def _to_entity(record: StoryRecord, tags: list[str]) -> Story:
    return Story(
        id=StoryId(record.id),
        title=record.title,
        content=record.content,
        author=record.author,
        tags=tags,
        created_at=record.created_at,
    )
