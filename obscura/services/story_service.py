"""Story Service — transactional use cases over the story repository.

Invariants:
    - Every operation runs in exactly one transaction: reads use db.read_only(),
      mutations use db.read_write()
    - A failed mutation leaves the database unchanged (rollback on any exception)
    - created_at is taken from the clock only on create, never on update
    - Missing stories raise StoryNotFoundError carrying the id

Design Decisions:
    - Repository built per transaction from repository_factory: the repository is
      bound to the transaction's session
    - clock injected for deterministic tests; defaults to local wall time
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from obscura.core.domain_types import StoryId
from obscura.core.errors import StoryNotFoundError
from obscura.core.story import new_story, revise_story
from obscura.infrastructure.database import DatabaseSessionManager
from obscura.schemas.story import StoryRequest, StoryResponse
from obscura.services.story_repository import StoryRepository

logger = logging.getLogger(__name__)


class StoryService:
    """Use-case layer for the story aggregate."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        repository_factory: Callable[[AsyncSession], StoryRepository] = StoryRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._db = db
        self._repository_factory = repository_factory
        self._clock = clock

    async def list_all(self) -> list[StoryResponse]:
        async with self._db.read_only() as session:
            stories = await self._repository_factory(session).find_all()
        return [StoryResponse.from_entity(s) for s in stories]

    async def get_by_id(self, story_id: StoryId) -> StoryResponse:
        async with self._db.read_only() as session:
            story = await self._repository_factory(session).find_by_id(story_id)
        if story is None:
            raise StoryNotFoundError(story_id)
        return StoryResponse.from_entity(story)

    async def create(self, request: StoryRequest) -> StoryResponse:
        story = new_story(
            title=request.title,
            content=request.content,
            author=request.author,
            tags=request.tags,
            created_at=self._clock(),
        )
        async with self._db.read_write() as session:
            saved = await self._repository_factory(session).save(story)
        logger.info("Story created", extra={"story_id": saved.id})
        return StoryResponse.from_entity(saved)

    async def update(
        self, story_id: StoryId, request: StoryRequest,
    ) -> StoryResponse:
        async with self._db.read_write() as session:
            repository = self._repository_factory(session)
            existing = await repository.find_by_id(story_id, for_update=True)
            if existing is None:
                raise StoryNotFoundError(story_id)
            revised = revise_story(
                existing,
                title=request.title,
                content=request.content,
                author=request.author,
                tags=request.tags,
            )
            saved = await repository.save(revised)
        logger.info("Story updated", extra={"story_id": story_id})
        return StoryResponse.from_entity(saved)

    async def delete(self, story_id: StoryId) -> None:
        async with self._db.read_write() as session:
            repository = self._repository_factory(session)
            if not await repository.exists_by_id(story_id):
                raise StoryNotFoundError(story_id)
            await repository.delete_by_id(story_id)
        logger.info("Story deleted", extra={"story_id": story_id})
