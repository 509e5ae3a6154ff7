"""
Interview Rounds API Endpoints
"""
from uuid import UUID

from fastapi import APIRouter, Depends, status

from application.services.lifecycle import IInterviewRoundManager
from presentation.api.v1.container import get_interview_round_manager
from presentation.api.v1.dependencies import get_current_user_id
from presentation.api.v1.schemas.interview import (
    InterviewCompleteRequest,
    InterviewPlanRequest,
    InterviewRejectRequest,
    InterviewRescheduleRequest,
    InterviewRoundListResponse,
    InterviewRoundResponse,
    InterviewScheduleRequest,
)


router = APIRouter()


@router.get("/applications/{application_id}/interviews", response_model=InterviewRoundListResponse)
async def list_interview_rounds(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    rounds = await round_manager.list_rounds(application_id, user_id=user_id)
    return InterviewRoundListResponse(
        rounds=[InterviewRoundResponse.from_domain(r) for r in rounds],
        next_round_number=await round_manager.next_round_number(application_id),
    )


@router.post(
    "/applications/{application_id}/interviews",
    response_model=InterviewRoundResponse,
    status_code=status.HTTP_201_CREATED
)
async def plan_interview_round(
    application_id: UUID,
    request: InterviewPlanRequest,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    """Add an unscheduled interview round"""
    interview_round = await round_manager.plan(
        application_id,
        round_number=request.round_number,
        type=request.type,
        mode=request.mode,
        custom_name=request.custom_name,
        user_id=user_id,
    )
    return InterviewRoundResponse.from_domain(interview_round)


@router.post("/applications/{application_id}/interviews/{round_number}/schedule", response_model=InterviewRoundResponse)
async def schedule_interview_round(
    application_id: UUID,
    round_number: int,
    request: InterviewScheduleRequest,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    interview_round = await round_manager.schedule(
        application_id,
        round_number,
        type=request.type,
        scheduled_at=request.scheduled_at,
        mode=request.mode,
        custom_name=request.custom_name,
        user_id=user_id,
    )
    return InterviewRoundResponse.from_domain(interview_round)


@router.post("/applications/{application_id}/interviews/{round_number}/reschedule", response_model=InterviewRoundResponse)
async def reschedule_interview_round(
    application_id: UUID,
    round_number: int,
    request: InterviewRescheduleRequest,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    interview_round = await round_manager.reschedule(
        application_id, round_number, request.scheduled_at, user_id=user_id
    )
    return InterviewRoundResponse.from_domain(interview_round)


@router.post("/applications/{application_id}/interviews/{round_number}/complete", response_model=InterviewRoundResponse)
async def complete_interview_round(
    application_id: UUID,
    round_number: int,
    request: InterviewCompleteRequest,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    interview_round = await round_manager.complete(
        application_id,
        round_number,
        request.completed_at,
        result=request.result,
        feedback=request.feedback,
        user_id=user_id,
    )
    return InterviewRoundResponse.from_domain(interview_round)


@router.post("/applications/{application_id}/interviews/{round_number}/reject", response_model=InterviewRoundResponse)
async def reject_interview_round(
    application_id: UUID,
    round_number: int,
    request: InterviewRejectRequest,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    interview_round = await round_manager.reject(
        application_id, round_number, reason=request.reason, user_id=user_id
    )
    return InterviewRoundResponse.from_domain(interview_round)


@router.post("/applications/{application_id}/interviews/{round_number}/withdraw", response_model=InterviewRoundResponse)
async def withdraw_interview_round(
    application_id: UUID,
    round_number: int,
    user_id: str = Depends(get_current_user_id),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    interview_round = await round_manager.withdraw(application_id, round_number, user_id=user_id)
    return InterviewRoundResponse.from_domain(interview_round)
