"""
Tests for ApplicationStageMachine
"""
import pytest
from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

from application.repositories.interfaces import ApplicationFilters
from application.services.lifecycle import ApplicationStageMachine
from core.exceptions import (
    InvalidStageException,
    InvalidTimestampException,
    NoOpTransitionException,
    RepositoryException,
    ResourceNotFoundException,
)
from domain.enums import ApplicationSource, StageActor
from domain.value_objects import Milestone

from conftest import BASE_TIME, at


class TestCreate:

    @pytest.mark.asyncio
    async def test_starts_in_wishlist(self, make_application, history_repo, trigger):
        application = await make_application()

        assert application.stage == "wishlist"
        assert application.milestone == Milestone.EXPLORATION
        assert application.created_at == BASE_TIME
        assert application.last_activity_at == BASE_TIME
        assert application.is_archived is False
        assert await history_repo.count_for_application(application.id) == 0
        assert trigger.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source,stage", [
        (ApplicationSource.APPLIED_SELF, "self_review"),
        (ApplicationSource.APPLIED_REFERRAL, "self_review"),
        (ApplicationSource.RECRUITER_OUTREACH, "recruiter_reachout"),
    ])
    async def test_source_moves_to_start_stage_as_system(self, make_application, stage_machine, source, stage):
        application = await make_application(source=source)

        assert application.stage == stage
        history = await stage_machine.history(application.id)
        assert len(history) == 1
        assert history[0].from_stage == "wishlist"
        assert history[0].to_stage == stage
        assert history[0].actor == StageActor.SYSTEM
        assert history[0].changed_at == BASE_TIME
        assert application.last_activity_at == BASE_TIME

    @pytest.mark.asyncio
    async def test_source_create_is_atomic(self, stage_machine, history_repo, store, uow, trigger):
        history_repo.fail_next_append = True

        with pytest.raises(RepositoryException):
            await stage_machine.create(
                user_id="user-1",
                company_id=uuid4(),
                role="SRE",
                source=ApplicationSource.APPLIED_SELF,
                created_at=BASE_TIME,
            )

        assert store.applications == {}
        assert store.history == []
        assert uow.commits == 0
        assert uow.rollbacks == 1
        assert trigger.calls == []

    @pytest.mark.asyncio
    async def test_source_create_commits_once_and_triggers_once(self, make_application, uow, trigger):
        application = await make_application(source=ApplicationSource.RECRUITER_OUTREACH)

        assert uow.commits == 1
        assert trigger.calls == [application.id]

    @pytest.mark.asyncio
    async def test_rejects_naive_created_at(self, stage_machine):
        with pytest.raises(InvalidTimestampException):
            await stage_machine.create(
                user_id="user-1", company_id=uuid4(), role="SRE", created_at=datetime(2026, 1, 1)
            )


class TestTransition:

    @pytest.mark.asyncio
    async def test_success_appends_exactly_one_history_row(self, make_application, stage_machine, history_repo):
        application = await make_application()

        result = await stage_machine.transition(application.id, "hr_shortlist", at=at(5))

        assert result.changed
        assert result.application.stage == "hr_shortlist"
        assert result.transition.from_stage == "wishlist"
        assert result.transition.to_stage == "hr_shortlist"
        assert result.transition.actor == StageActor.USER
        assert await history_repo.count_for_application(application.id) == 1
        assert (await stage_machine.get(application.id)).stage == "hr_shortlist"

    @pytest.mark.asyncio
    async def test_milestone_follows_stage(self, make_application, stage_machine):
        application = await make_application()

        result = await stage_machine.transition(application.id, "interview_round_2", at=at(1))
        assert result.application.milestone == Milestone.INTERVIEWING

        result = await stage_machine.transition(application.id, "offer", at=at(2))
        assert result.application.milestone == Milestone.POST_INTERVIEW

    @pytest.mark.asyncio
    async def test_triggers_recompute_once(self, make_application, stage_machine, trigger):
        application = await make_application()

        await stage_machine.transition(application.id, "self_review", at=at(10))

        assert trigger.calls == [application.id]
        assert (await stage_machine.get(application.id)).last_activity_at == at(10)

    @pytest.mark.asyncio
    async def test_result_reflects_recomputed_activity(self, make_application, stage_machine):
        application = await make_application()

        result = await stage_machine.transition(application.id, "interview_round_1", at=at(60))

        assert result.application.last_activity_at == at(60)
        assert result.application.milestone == Milestone.INTERVIEWING

    @pytest.mark.asyncio
    async def test_backdated_move_rejected(self, make_application, stage_machine, history_repo, trigger):
        application = await make_application()
        await stage_machine.transition(application.id, "hr_shortlist", at=at(60))

        with pytest.raises(InvalidTimestampException) as exc_info:
            await stage_machine.transition(application.id, "offer", at=at(30))

        assert exc_info.value.field == "changed_at"
        assert (await stage_machine.get(application.id)).stage == "hr_shortlist"
        assert await history_repo.count_for_application(application.id) == 1
        assert trigger.calls == [application.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("moves", [
        [("hr_shortlist", 10), ("hm_shortlist", 20), ("offer", 30)],
        [("offer", 10), ("self_review", 10), ("interview_round_2", 10)],
        [("interview_round_1", 5), ("interview_round_2", 40), ("wishlist", 40)],
    ])
    async def test_latest_history_entry_matches_stage(self, make_application, stage_machine, moves):
        application = await make_application(source=ApplicationSource.APPLIED_SELF)

        for stage, minutes in moves:
            await stage_machine.transition(application.id, stage, at=at(minutes))

        current = await stage_machine.get(application.id)
        history = await stage_machine.history(application.id)
        assert current.stage == moves[-1][0]
        assert history[0].to_stage == current.stage
        assert len(history) == len(moves) + 1

    @pytest.mark.asyncio
    async def test_backward_moves_are_allowed(self, make_application, stage_machine):
        application = await make_application()
        await stage_machine.transition(application.id, "offer", at=at(1))

        result = await stage_machine.transition(application.id, "wishlist", at=at(2))

        assert result.application.stage == "wishlist"

    @pytest.mark.asyncio
    async def test_same_stage_is_a_noop(self, make_application, stage_machine, history_repo, trigger, uow):
        application = await make_application()
        commits = uow.commits

        result = await stage_machine.transition(application.id, "wishlist", at=at(3))

        assert not result.changed
        assert result.transition is None
        assert result.application.stage == "wishlist"
        assert await history_repo.count_for_application(application.id) == 0
        assert trigger.calls == []
        assert uow.commits == commits

    @pytest.mark.asyncio
    async def test_same_stage_strict_raises(self, make_application, stage_machine):
        application = await make_application()

        with pytest.raises(NoOpTransitionException):
            await stage_machine.transition(application.id, "wishlist", strict=True)

    @pytest.mark.asyncio
    async def test_strict_default_from_constructor(
        self, make_application, application_repo, history_repo, uow, trigger
    ):
        application = await make_application()
        strict_machine = ApplicationStageMachine(application_repo, history_repo, uow, trigger, strict_noop=True)

        with pytest.raises(NoOpTransitionException):
            await strict_machine.transition(application.id, "wishlist")

        result = await strict_machine.transition(application.id, "wishlist", strict=False)
        assert not result.changed

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stage", ["interviewing", "interview_round_0", "interview_round_01", "rejected"])
    async def test_invalid_stage_changes_nothing(self, make_application, stage_machine, history_repo, trigger, stage):
        application = await make_application()

        with pytest.raises(InvalidStageException):
            await stage_machine.transition(application.id, stage)

        assert (await stage_machine.get(application.id)).stage == "wishlist"
        assert await history_repo.count_for_application(application.id) == 0
        assert trigger.calls == []

    @pytest.mark.asyncio
    async def test_naive_timestamp_rejected(self, make_application, stage_machine):
        application = await make_application()

        with pytest.raises(InvalidTimestampException):
            await stage_machine.transition(application.id, "offer", at=datetime(2026, 3, 2, 10, 0))

    @pytest.mark.asyncio
    async def test_unknown_application(self, stage_machine):
        with pytest.raises(ResourceNotFoundException):
            await stage_machine.transition(uuid4(), "offer")

    @pytest.mark.asyncio
    async def test_other_users_application_is_not_found(self, make_application, stage_machine):
        application = await make_application(user_id="user-1")

        with pytest.raises(ResourceNotFoundException):
            await stage_machine.transition(application.id, "offer", user_id="user-2")

    @pytest.mark.asyncio
    async def test_history_failure_rolls_back_stage(self, make_application, stage_machine, history_repo, trigger, uow):
        application = await make_application()
        history_repo.fail_next_append = True

        with pytest.raises(RepositoryException):
            await stage_machine.transition(application.id, "hr_shortlist", at=at(1))

        assert uow.rollbacks == 1
        assert (await stage_machine.get(application.id)).stage == "wishlist"
        assert await history_repo.count_for_application(application.id) == 0
        assert trigger.calls == []

    @pytest.mark.asyncio
    async def test_trigger_failure_does_not_fail_transition(self, make_application, application_repo, history_repo, uow):
        failing_trigger = AsyncMock()
        failing_trigger.trigger.side_effect = RuntimeError("queue down")
        machine = ApplicationStageMachine(application_repo, history_repo, uow, failing_trigger)
        application = await make_application()

        result = await machine.transition(application.id, "hr_shortlist", at=at(1))

        assert result.changed
        failing_trigger.trigger.assert_awaited_once_with(application.id)
        assert (await machine.get(application.id)).stage == "hr_shortlist"


class TestQueries:

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, make_application, stage_machine):
        application = await make_application()
        await stage_machine.transition(application.id, "self_review", at=at(1))
        await stage_machine.transition(application.id, "hr_shortlist", at=at(2))
        await stage_machine.transition(application.id, "interview_round_1", at=at(3))

        history = await stage_machine.history(application.id)

        assert [t.to_stage for t in history] == ["interview_round_1", "hr_shortlist", "self_review"]

    @pytest.mark.asyncio
    async def test_archive_and_unarchive(self, make_application, stage_machine):
        application = await make_application()

        archived = await stage_machine.set_archived(application.id, True)
        assert archived.is_archived

        again = await stage_machine.set_archived(application.id, True)
        assert again.is_archived

        restored = await stage_machine.set_archived(application.id, False)
        assert not restored.is_archived

    @pytest.mark.asyncio
    async def test_list_for_user_only_returns_own(self, make_application, stage_machine):
        mine = await make_application(user_id="user-1")
        await make_application(user_id="user-2")

        found = await stage_machine.list_for_user("user-1")

        assert [a.id for a in found] == [mine.id]

    @pytest.mark.asyncio
    async def test_list_for_user_filters_by_milestone(self, make_application, stage_machine):
        first = await make_application()
        await make_application()
        await stage_machine.transition(first.id, "interview_round_1", at=at(1))

        found = await stage_machine.list_for_user(
            "user-1", ApplicationFilters(milestone=Milestone.INTERVIEWING)
        )

        assert [a.id for a in found] == [first.id]
