"""Discord-facing services: role gateway, scheduled events and cancellation."""

import logging
from types import SimpleNamespace

import discord
import pytest
from conftest import ACTOR_ID, ROLE_ID, FakeGuild, FakeRole, http_error

from shared.models import GameDayStatus
from tabletop.services.channels import create_private_category
from tabletop.services.events import (
    EventError,
    EventErrorCode,
    _wrap,
    delete_event,
    user_friendly_event_error,
)
from tabletop.services.lifecycle import cancel_game_day
from tabletop.services.roles import DiscordRoleGateway, RoleSyncError
from tabletop.services.side_effects import best_effort


class FakeMember:
    def __init__(self, role_ids=(), *, error=None):
        self.role_ids = {int(r) for r in role_ids}
        self.error = error
        self.added = []
        self.removed = []

    def get_role(self, role_id):
        return SimpleNamespace(id=role_id) if role_id in self.role_ids else None

    async def add_roles(self, role, reason=None):
        if self.error:
            raise self.error
        self.added.append(role.id)
        self.role_ids.add(role.id)

    async def remove_roles(self, role, reason=None):
        if self.error:
            raise self.error
        self.removed.append(role.id)
        self.role_ids.discard(role.id)


class MemberGuild:
    def __init__(self, member=None, *, fetch_error=None):
        self.id = 1
        self.member = member
        self.fetch_error = fetch_error

    def get_member(self, user_id):
        return self.member

    async def fetch_member(self, user_id):
        if self.fetch_error:
            raise self.fetch_error
        raise http_error(discord.NotFound, 404)


# ==================== Role gateway ====================


async def test_grant_adds_missing_role():
    member = FakeMember()
    gateway = DiscordRoleGateway(MemberGuild(member))

    assert await gateway.grant(ACTOR_ID, ROLE_ID) is True
    assert member.added == [int(ROLE_ID)]


async def test_grant_is_noop_when_role_held():
    member = FakeMember([ROLE_ID])
    gateway = DiscordRoleGateway(MemberGuild(member))

    assert await gateway.grant(ACTOR_ID, ROLE_ID) is False
    assert member.added == []


async def test_revoke_is_noop_when_role_absent():
    member = FakeMember()
    gateway = DiscordRoleGateway(MemberGuild(member))

    assert await gateway.revoke(ACTOR_ID, ROLE_ID) is False
    assert member.removed == []


async def test_revoke_for_departed_member_is_noop():
    gateway = DiscordRoleGateway(MemberGuild(None))
    assert await gateway.revoke(ACTOR_ID, ROLE_ID) is False


async def test_grant_for_departed_member_fails():
    gateway = DiscordRoleGateway(MemberGuild(None))
    with pytest.raises(RoleSyncError) as exc_info:
        await gateway.grant(ACTOR_ID, ROLE_ID)
    assert exc_info.value.actor_id == ACTOR_ID
    assert exc_info.value.role_id == ROLE_ID


async def test_forbidden_becomes_role_sync_error():
    member = FakeMember(error=http_error())
    gateway = DiscordRoleGateway(MemberGuild(member))
    with pytest.raises(RoleSyncError):
        await gateway.grant(ACTOR_ID, ROLE_ID)


async def test_member_fetch_failure_becomes_role_sync_error():
    guild = MemberGuild(None, fetch_error=http_error(discord.HTTPException, 500))
    with pytest.raises(RoleSyncError):
        await DiscordRoleGateway(guild).revoke(ACTOR_ID, ROLE_ID)


# ==================== Scheduled events ====================


@pytest.mark.parametrize(
    "error,code",
    [
        (http_error(discord.Forbidden, 403), EventErrorCode.MISSING_PERMISSIONS),
        (http_error(discord.NotFound, 404), EventErrorCode.EVENT_NOT_FOUND),
        (http_error(discord.HTTPException, 500), EventErrorCode.UNKNOWN_ERROR),
    ],
)
def test_wrap_maps_http_errors(error, code):
    wrapped = _wrap(error, "edit event")
    assert wrapped.code is code
    assert wrapped.original is error


def test_friendly_messages():
    missing = EventError(EventErrorCode.MISSING_PERMISSIONS, "x")
    unknown = EventError(EventErrorCode.UNKNOWN_ERROR, "x")
    assert "Manage Events" in user_friendly_event_error(missing)
    assert "unknown error" in user_friendly_event_error(unknown)


async def test_delete_event_already_gone():
    class Guild:
        async def fetch_scheduled_event(self, event_id):
            raise http_error(discord.NotFound, 404)

    assert await delete_event(Guild(), "456789012345678901") is False


async def test_delete_event_forbidden():
    class Event:
        async def delete(self, reason=None):
            raise http_error(discord.Forbidden, 403)

    class Guild:
        async def fetch_scheduled_event(self, event_id):
            return Event()

    with pytest.raises(EventError) as exc_info:
        await delete_event(Guild(), "456789012345678901")
    assert exc_info.value.code is EventErrorCode.MISSING_PERMISSIONS


# ==================== Cancellation ====================


async def test_cancel_marks_cancelled_and_reports_event_caveat(repos):
    class Guild:
        id = 1

        async def fetch_scheduled_event(self, event_id):
            raise http_error(discord.Forbidden, 403)

    game_day = repos.game_days.add(discord_event_id="456789012345678901")

    report = await cancel_game_day(Guild(), game_day, repos)

    assert report.game_day.status is GameDayStatus.CANCELLED
    assert repos.game_days.items[game_day.id].status is GameDayStatus.CANCELLED
    assert len(report.caveats) == 1
    assert "Manage Events" in report.caveats[0]


async def test_cancel_without_side_effects_has_no_caveats(repos):
    game_day = repos.game_days.add()
    report = await cancel_game_day(SimpleNamespace(id=1), game_day, repos)
    assert report.caveats == []


async def test_cancel_returns_none_when_storage_is_down(repos):
    async def unreachable(game_day_id, **changes):
        raise ConnectionRefusedError("database is down")

    game_day = repos.game_days.add()
    repos.game_days.update = unreachable

    assert await cancel_game_day(SimpleNamespace(id=1), game_day, repos) is None
    assert game_day.status is GameDayStatus.SCHEDULING


async def test_cancel_with_category_already_gone_has_no_caveat(repos):
    game_day = repos.game_days.add(discord_category_id="567890123456789012")

    report = await cancel_game_day(FakeGuild(), game_day, repos)

    assert report.game_day.status is GameDayStatus.CANCELLED
    assert report.caveats == []


async def test_cancel_reports_category_that_could_not_be_deleted(repos):
    class Guild(FakeGuild):
        async def fetch_channel(self, channel_id):
            raise http_error(discord.Forbidden, 403)

    game_day = repos.game_days.add(discord_category_id="567890123456789012")

    report = await cancel_game_day(Guild(), game_day, repos)

    assert report.caveats == ["The private channels could not be deleted."]


# ==================== Private channels ====================


async def test_private_category_gets_every_channel():
    guild = FakeGuild()

    category = await create_private_category(guild, "Board Game Night", FakeRole("night"))

    assert [c.name for c in category.channels] == ["general", "logistics", "food", "game"]
    assert not category.deleted


async def test_failed_channel_removes_partial_category():
    guild = FakeGuild()
    guild.channel_fail_after = 1

    with pytest.raises(discord.HTTPException):
        await create_private_category(guild, "Board Game Night", FakeRole("night"))

    category = guild.categories[0]
    assert len(category.channels) == 1
    assert category.channels[0].deleted
    assert category.deleted


# ==================== best_effort ====================


async def test_best_effort_swallows_and_logs(caplog):
    async def broken():
        raise RuntimeError("nope")

    with caplog.at_level(logging.WARNING):
        assert await best_effort(broken(), "refresh announcement") is None
    assert "refresh announcement" in caplog.text


async def test_best_effort_returns_value():
    async def fine():
        return 7

    assert await best_effort(fine(), "x") == 7
