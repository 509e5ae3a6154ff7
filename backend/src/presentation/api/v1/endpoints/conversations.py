"""
Conversations API Endpoints
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.services.lifecycle import IConversationService
from presentation.api.v1.container import get_conversation_service
from presentation.api.v1.dependencies import get_current_user_id
from presentation.api.v1.schemas.conversation import (
    ConversationCreateRequest,
    ConversationEventResponse,
    ConversationListResponse,
)


router = APIRouter()


@router.get("/applications/{application_id}/conversations", response_model=ConversationListResponse)
async def list_conversations(
    application_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    before: Optional[datetime] = Query(None, description="Only events strictly older than this"),
    user_id: str = Depends(get_current_user_id),
    conversation_service: IConversationService = Depends(get_conversation_service)
):
    events = await conversation_service.list_events(
        application_id, limit=limit, before=before, user_id=user_id
    )
    return ConversationListResponse(events=[ConversationEventResponse.from_domain(e) for e in events])


@router.post(
    "/applications/{application_id}/conversations",
    response_model=ConversationEventResponse,
    status_code=status.HTTP_201_CREATED
)
async def record_conversation(
    application_id: UUID,
    request: ConversationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    conversation_service: IConversationService = Depends(get_conversation_service)
):
    event = await conversation_service.record(
        application_id,
        medium=request.medium,
        direction=request.direction,
        text=request.text,
        occurred_at=request.occurred_at,
        contact_id=request.contact_id,
        user_id=user_id,
    )
    return ConversationEventResponse.from_domain(event)
