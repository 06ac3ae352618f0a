"""Story Routes — CRUD endpoints for /api/stories.

Invariants:
    - Routes decode, validate, dispatch to StoryService, and return; no business logic
    - check_story_request() runs before the service is entered; violations → 400
    - {story_id} is a 64-bit signed integer; anything else → 400
    - StoryNotFoundError propagates to the global handler → 404

Design Decisions:
    - StoryService provided through get_story_service so tests can override it
    - POST answers 200 (not 201) with the created story; DELETE answers 204 with no body
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from obscura.core.domain_types import STORY_ID_MAX, STORY_ID_MIN, StoryId
from obscura.core.errors import StoryValidationError
from obscura.core.validate_story import check_story_request
from obscura.infrastructure.database import DatabaseSessionManager, get_db_manager
from obscura.schemas.story import StoryRequest, StoryResponse
from obscura.services.story_service import StoryService

router = APIRouter(prefix="/api/stories", tags=["stories"])

StoryIdPath = Annotated[int, Path(ge=STORY_ID_MIN, le=STORY_ID_MAX)]


def get_story_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> StoryService:
    return StoryService(db)


def validated(request: StoryRequest) -> StoryRequest:
    """Raise StoryValidationError listing every failed field rule."""
    violations = check_story_request(request)
    if violations:
        raise StoryValidationError(violations)
    return request


@router.get("", response_model=list[StoryResponse])
async def list_stories(service: StoryService = Depends(get_story_service)):
    """List every story."""
    return await service.list_all()


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(
    story_id: StoryIdPath, service: StoryService = Depends(get_story_service),
):
    """Get a single story."""
    return await service.get_by_id(StoryId(story_id))


@router.post("", response_model=StoryResponse)
async def create_story(
    body: StoryRequest, service: StoryService = Depends(get_story_service),
):
    """Create a story stamped with the current local time."""
    return await service.create(validated(body))


@router.put("/{story_id}", response_model=StoryResponse)
async def update_story(
    story_id: StoryIdPath,
    body: StoryRequest,
    service: StoryService = Depends(get_story_service),
):
    """Rewrite title, content, author and tags; createdAt is kept."""
    return await service.update(StoryId(story_id), validated(body))


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story(
    story_id: StoryIdPath, service: StoryService = Depends(get_story_service),
):
    """Delete a story and, through the database cascade, its tags."""
    await service.delete(StoryId(story_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
