from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from .auth import require_session
from .dependencies import get_app_state
from .schemas.entities import (
    DeletionTicket, ResetRequest,
    ChildCreateRequest, ChildUpdateRequest,
    TeacherCreateRequest, TeacherUpdateRequest,
    LessonUpdateRequest,
    PhotoCreateRequest, PhotoUpdateRequest,
    MessageCreateRequest, MessageUpdateRequest,
    EventCreateRequest, EventUpdateRequest,
)
from ..services.app_state import AppState, CHILDREN, TEACHERS, LESSONS, PHOTOS, MESSAGES, EVENTS
from ..services.entity_collection import (
    EntityCollection, EntityKind, ServiceError, NotFoundError, ConfirmationRequiredError
)


def build_entity_router(
    kind: EntityKind,
    update_schema: Type[BaseModel],
    create_schema: Optional[Type[BaseModel]] = None,
    tag: str = None
) -> APIRouter:
    """
    Builds the list/editor endpoints of one entity kind.

    Passing ``create_schema=None`` leaves creation to a dedicated router (the
    lesson editor creates lessons itself so it can drop the draft).
    """
    router = APIRouter(prefix=f"/{kind.name}", tags=[tag or kind.name.title()], dependencies=[Depends(require_session)])
    model = kind.model

    def get_collection(state: AppState = Depends(get_app_state)) -> EntityCollection:
        return state.collection(kind.name)

    @router.get("", response_model=List[model], summary=f"List {kind.name}")
    async def list_records(
        q: Optional[str] = Query(None, description="Case-insensitive search on the name field."),
        category: Optional[str] = Query(None, description="Exact match on the category field."),
        collection: EntityCollection = Depends(get_collection)
    ):
        return collection.list(name_query=q, category=category)

    @router.get("/categories", response_model=List[str], summary=f"Distinct categories used by {kind.name}")
    async def list_categories(collection: EntityCollection = Depends(get_collection)):
        return collection.categories()

    @router.get("/{entity_id}", response_model=model)
    async def get_record(entity_id: str, collection: EntityCollection = Depends(get_collection)):
        try:
            return collection.get(entity_id)
        except NotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if create_schema is not None:
        @router.post("", response_model=model, status_code=status.HTTP_201_CREATED)
        async def create_record(create_request: create_schema, collection: EntityCollection = Depends(get_collection)):
            try:
                return await collection.create(create_request.model_dump())
            except ServiceError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    @router.patch("/{entity_id}", response_model=model)
    async def update_record(entity_id: str, update_request: update_schema, collection: EntityCollection = Depends(get_collection)):
        try:
            return await collection.update(entity_id, update_request.model_dump(exclude_unset=True))
        except NotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        except ServiceError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    @router.post("/{entity_id}/deletion-requests", response_model=DeletionTicket, status_code=status.HTTP_201_CREATED,
                 summary="Ask for the confirmation token required to delete a record")
    async def request_deletion(entity_id: str, collection: EntityCollection = Depends(get_collection)):
        return DeletionTicket(confirmation_token=collection.request_deletion(entity_id))

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(
        entity_id: str,
        confirmation_token: str = Query(..., alias="confirmationToken"),
        collection: EntityCollection = Depends(get_collection)
    ):
        try:
            await collection.delete(entity_id, confirmation_token)
        except ConfirmationRequiredError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if kind.toggle_fields:
        @router.post("/{entity_id}/toggle/{field_name}", response_model=model, summary="Flip a boolean field, e.g. attendance")
        async def toggle_field(entity_id: str, field_name: str, collection: EntityCollection = Depends(get_collection)):
            try:
                return await collection.toggle(entity_id, field_name)
            except NotFoundError as e:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
            except ServiceError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        @router.post("/reset/{field_name}", response_model=List[model], summary="Set a boolean field on every record")
        async def reset_field(field_name: str, reset_request: ResetRequest, collection: EntityCollection = Depends(get_collection)):
            try:
                return await collection.reset_all(field_name, reset_request.value)
            except ServiceError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return router


children_router = build_entity_router(CHILDREN, ChildUpdateRequest, ChildCreateRequest, tag="Children")
teachers_router = build_entity_router(TEACHERS, TeacherUpdateRequest, TeacherCreateRequest, tag="Teachers")
lessons_router = build_entity_router(LESSONS, LessonUpdateRequest, tag="Lessons")
photos_router = build_entity_router(PHOTOS, PhotoUpdateRequest, PhotoCreateRequest, tag="Gallery")
messages_router = build_entity_router(MESSAGES, MessageUpdateRequest, MessageCreateRequest, tag="Messages")
events_router = build_entity_router(EVENTS, EventUpdateRequest, EventCreateRequest, tag="Events")
