"""
Applications API Endpoints
Create, list and move applications through their stages
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from application.repositories.interfaces import ApplicationFilters
from application.services.lifecycle import (
    IActivityRecomputer,
    IApplicationStageMachine,
    IInterviewRoundManager,
)
from domain.entities import Application
from domain.enums import StageActor
from domain.value_objects import Milestone, ensure_aware, require_valid_stage
from presentation.api.v1.container import (
    get_activity_recomputer,
    get_interview_round_manager,
    get_stage_machine,
)
from presentation.api.v1.dependencies import get_current_user_id
from presentation.api.v1.schemas.application import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationResponse,
    RecomputeResponse,
    StageTransitionResponse,
    TransitionRequest,
    TransitionResponse,
)


router = APIRouter()


async def _to_response(
    application: Application,
    round_manager: IInterviewRoundManager
) -> ApplicationResponse:
    """Attach the current interview round, if any, to the stage object"""
    interview_round = None
    if application.interview_round_number is not None:
        interview_round = await round_manager.get_round(application.id, application.interview_round_number)
    return ApplicationResponse.from_domain(application, interview_round)


@router.post("/applications", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    request: ApplicationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    """
    Create a tracked application.

    Starts in **wishlist**; applications sourced as applied_self or
    applied_referral move to self_review, recruiter_outreach to
    recruiter_reachout, recorded as a system transition.
    """
    application = await stage_machine.create(
        user_id=user_id,
        company_id=request.company_id,
        role=request.role,
        source=request.source,
        platform_id=request.platform_id,
        job_url=request.job_url,
        notes=request.notes,
        created_at=request.created_at,
    )
    return await _to_response(application, round_manager)


@router.get("/applications", response_model=ApplicationListResponse)
async def list_applications(
    stage: Optional[str] = Query(None, description="Exact stage id"),
    milestone: Optional[Milestone] = Query(None),
    platform_id: Optional[UUID] = Query(None),
    company_id: Optional[UUID] = Query(None),
    archived: bool = Query(False),
    activity_from: Optional[datetime] = Query(None),
    activity_to: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    """List the caller's applications, most recently active first"""
    if stage is not None:
        require_valid_stage(stage)

    filters = ApplicationFilters(
        stage=stage,
        milestone=milestone,
        platform_id=platform_id,
        company_id=company_id,
        is_archived=archived,
        activity_from=ensure_aware(activity_from, "activity_from"),
        activity_to=ensure_aware(activity_to, "activity_to"),
    )
    applications = await stage_machine.list_for_user(user_id, filters, limit=limit, offset=offset)

    return ApplicationListResponse(
        applications=[await _to_response(a, round_manager) for a in applications],
        count=len(applications),
        limit=limit,
        offset=offset,
    )


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    application = await stage_machine.get(application_id, user_id=user_id)
    return await _to_response(application, round_manager)


@router.post("/applications/{application_id}/transition", response_model=TransitionResponse)
async def transition_application(
    application_id: UUID,
    request: TransitionRequest,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    """
    Move an application to another stage.

    `to_stage` accepts a stage id (`"hr_shortlist"`, `"interview_round_3"`)
    or a stage object. Moving to the current stage returns `changed: false`
    unless `strict` is set, which answers 409 instead.
    """
    result = await stage_machine.transition(
        application_id,
        request.stage_id(),
        actor=StageActor.USER,
        at=request.at,
        reason=request.reason,
        strict=request.strict,
        user_id=user_id,
    )
    return TransitionResponse(
        application=await _to_response(result.application, round_manager),
        changed=result.changed,
    )


@router.get("/applications/{application_id}/history", response_model=List[StageTransitionResponse])
async def get_stage_history(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine)
):
    """Stage history, newest first"""
    history = await stage_machine.history(application_id, user_id=user_id)
    return [StageTransitionResponse.from_domain(t) for t in history]


@router.post("/applications/{application_id}/archive", response_model=ApplicationResponse)
async def archive_application(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    application = await stage_machine.set_archived(application_id, True, user_id=user_id)
    return await _to_response(application, round_manager)


@router.post("/applications/{application_id}/unarchive", response_model=ApplicationResponse)
async def unarchive_application(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    round_manager: IInterviewRoundManager = Depends(get_interview_round_manager)
):
    application = await stage_machine.set_archived(application_id, False, user_id=user_id)
    return await _to_response(application, round_manager)


@router.post("/applications/{application_id}/activity/recompute", response_model=RecomputeResponse)
async def recompute_activity(
    application_id: UUID,
    user_id: str = Depends(get_current_user_id),
    stage_machine: IApplicationStageMachine = Depends(get_stage_machine),
    recomputer: IActivityRecomputer = Depends(get_activity_recomputer)
):
    """Recompute last_activity_at now, bypassing the background worker"""
    await stage_machine.get(application_id, user_id=user_id)
    changed = await recomputer.recompute(application_id)
    application = await stage_machine.get(application_id, user_id=user_id)

    logger.info(f"Manual recompute for application {application_id}: changed={changed}")
    return RecomputeResponse(
        application_id=application_id,
        last_activity_at=application.last_activity_at,
        changed=changed,
    )
