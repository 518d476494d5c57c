"""Modal submissions end to end: schedule game day, game setup, create campaign."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import discord
import pytest
from conftest import (
    ACTOR_ID,
    GUILD_ID,
    FakeGuild,
    FakeInteraction,
    http_error,
    modal_data,
    new_id,
)

from shared.models import AttendanceStatus, Game, GameDayStatus
from tabletop import messages
from tabletop.handlers import CreateCampaignHandler, GameSetupHandler, ScheduleGameDayHandler
from tabletop.interactions import (
    CreateCampaignPayload,
    GameSetupPayload,
    InteractionDispatcher,
    ModalIntent,
    ModalKind,
    ScheduleGameDayPayload,
    encode,
)

OTHER_ID = "456789012345678901"


@pytest.fixture
def server(repos):
    server = SimpleNamespace(id=new_id(), discord_id=GUILD_ID, scheduling_channel_id=None)
    repos.servers.items[GUILD_ID] = server
    return server


@pytest.fixture
def guild():
    return FakeGuild()


@pytest.fixture
def dispatcher(repos, role_gateway):
    return InteractionDispatcher(
        [
            ScheduleGameDayHandler(repos, ZoneInfo("UTC"), roles_for=lambda guild: role_gateway),
            GameSetupHandler(repos),
            CreateCampaignHandler(repos),
        ]
    )


def submit(guild, kind, payload, **values) -> FakeInteraction:
    custom_id = encode(ModalIntent(kind, payload))
    interaction = FakeInteraction(modal_data(custom_id, **values), guild=guild)
    interaction.type = discord.InteractionType.modal_submit
    return interaction


def in_days(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).strftime("%Y-%m-%d %H:%M")


# ==================== Schedule game day ====================


def schedule(guild, *, guild_id=GUILD_ID, host_id=ACTOR_ID, **values) -> FakeInteraction:
    values.setdefault("title", "Board Game Night")
    values.setdefault("date_time", in_days(7))
    values.setdefault("location", "Game Store")
    return submit(
        guild, ModalKind.SCHEDULE_GAME_DAY, ScheduleGameDayPayload(guild_id, host_id), **values
    )


async def test_schedule_builds_game_day_and_marks_host_available(
    dispatcher, repos, role_gateway, server, guild
):
    interaction = schedule(guild)

    assert await dispatcher.dispatch(interaction) is True

    (game_day,) = repos.game_days.items.values()
    (role,) = guild.roles
    assert game_day.status is GameDayStatus.SCHEDULING
    assert game_day.server_id == server.id
    assert game_day.host_user_id == ACTOR_ID
    assert game_day.discord_role_id == str(role.id)
    assert game_day.discord_category_id == str(guild.categories[0].id)
    assert game_day.discord_event_id is not None
    assert guild.events[0]["location"] == "Game Store"

    assert repos.attendances.records[(game_day.id, ACTOR_ID)].status is AttendanceStatus.AVAILABLE
    assert (ACTOR_ID, str(role.id)) in role_gateway.held
    assert "Board Game Night" in interaction.last_reply
    assert interaction.edits[-1]["embed"].title == "Board Game Night"


async def test_schedule_without_scheduling_channel_is_a_caveat(dispatcher, repos, server, guild):
    interaction = schedule(guild)
    await dispatcher.dispatch(interaction)
    assert "No scheduling channel is set" in interaction.last_reply
    assert len(repos.game_days.items) == 1


async def test_schedule_rejects_past_dates(dispatcher, repos, server, guild):
    interaction = schedule(guild, date_time="2020-01-01 19:00")

    await dispatcher.dispatch(interaction)

    assert "future" in interaction.last_reply
    assert guild.roles == []
    assert repos.game_days.items == {}


async def test_schedule_rejects_malformed_dates(dispatcher, repos, server, guild):
    interaction = schedule(guild, date_time="next friday")
    await dispatcher.dispatch(interaction)
    assert "YYYY-MM-DD HH:MM" in interaction.last_reply
    assert repos.game_days.items == {}


@pytest.mark.parametrize(
    "guild_id,host_id",
    [(OTHER_ID, ACTOR_ID), (GUILD_ID, OTHER_ID)],
    ids=["other-guild", "other-host"],
)
async def test_schedule_form_for_someone_else_has_expired(
    dispatcher, repos, server, guild, guild_id, host_id
):
    interaction = schedule(guild, guild_id=guild_id, host_id=host_id)

    await dispatcher.dispatch(interaction)

    assert interaction.last_reply == messages.FORM_EXPIRED
    assert guild.roles == []
    assert repos.game_days.items == {}


async def test_schedule_deletes_new_role_when_insert_fails(dispatcher, repos, server, guild):
    repos.game_days.raise_error = ConnectionRefusedError("database is down")
    interaction = schedule(guild)

    await dispatcher.dispatch(interaction)

    assert interaction.last_reply == messages.STORAGE_ERROR
    (role,) = guild.roles
    assert role.deleted
    assert guild.categories == []


async def test_schedule_reports_channel_and_event_failures(
    dispatcher, repos, role_gateway, server, guild
):
    guild.channel_fail_after = 2
    guild.event_error = http_error(discord.Forbidden, 403)
    interaction = schedule(guild)

    await dispatcher.dispatch(interaction)

    (game_day,) = repos.game_days.items.values()
    assert game_day.discord_category_id is None
    assert game_day.discord_event_id is None
    assert guild.categories[0].deleted
    assert "private channels could not be created" in interaction.last_reply
    assert "Manage Events" in interaction.last_reply
    assert repos.attendances.records[(game_day.id, ACTOR_ID)].status is AttendanceStatus.AVAILABLE


async def test_schedule_reports_host_role_failure(dispatcher, repos, role_gateway, server, guild):
    role_gateway.fail = True
    interaction = schedule(guild)

    await dispatcher.dispatch(interaction)

    (game_day,) = repos.game_days.items.values()
    assert repos.attendances.records[(game_day.id, ACTOR_ID)].status is AttendanceStatus.AVAILABLE
    assert "could not be given to you" in interaction.last_reply


async def test_schedule_links_game_by_role(dispatcher, repos, server, guild):
    game = Game(id=new_id(), name="Wingspan", short_name="WS", discord_role_id=OTHER_ID)
    repos.games.items[game.id] = game
    interaction = submit(
        guild,
        ModalKind.SCHEDULE_GAME_DAY,
        ScheduleGameDayPayload(GUILD_ID, ACTOR_ID, OTHER_ID),
        title="Wingspan Night",
        date_time=in_days(3),
    )

    await dispatcher.dispatch(interaction)

    (game_day,) = repos.game_days.items.values()
    assert game_day.game_id == game.id


# ==================== Game setup ====================


def game_setup(guild, *, guild_id=GUILD_ID, role_id=None, **values) -> FakeInteraction:
    values.setdefault("name", "Wingspan")
    values.setdefault("short_name", "WS")
    values.setdefault("players", "1-5")
    return submit(guild, ModalKind.GAME_SETUP, GameSetupPayload(guild_id, role_id), **values)


async def test_game_setup_creates_role_and_game(dispatcher, repos, server, guild):
    interaction = game_setup(guild)

    await dispatcher.dispatch(interaction)

    (game,) = repos.games.items.values()
    (role,) = guild.roles
    assert role.name == "Wingspan"
    assert game.discord_role_id == str(role.id)
    assert (game.min_players, game.max_players) == (1, 5)
    assert game.server_id == server.id
    assert role.mention in interaction.last_reply


async def test_game_setup_deletes_new_role_when_insert_fails(dispatcher, repos, server, guild):
    repos.games.raise_error = ConnectionRefusedError("database is down")
    interaction = game_setup(guild)

    await dispatcher.dispatch(interaction)

    assert interaction.last_reply == messages.STORAGE_ERROR
    assert guild.roles[0].deleted


async def test_game_setup_keeps_existing_role_when_insert_fails(dispatcher, repos, server, guild):
    existing = await guild.create_role(name="Wingspan")
    repos.games.raise_error = ConnectionRefusedError("database is down")
    interaction = game_setup(guild, role_id=str(existing.id))

    await dispatcher.dispatch(interaction)

    assert interaction.last_reply == messages.STORAGE_ERROR
    assert guild.roles == [existing]
    assert not existing.deleted


async def test_game_setup_from_other_guild_has_expired(dispatcher, repos, server, guild):
    interaction = game_setup(guild, guild_id=OTHER_ID)
    await dispatcher.dispatch(interaction)
    assert interaction.last_reply == messages.FORM_EXPIRED
    assert repos.games.items == {}


async def test_game_setup_rejects_bad_player_range(dispatcher, repos, server, guild):
    interaction = game_setup(guild, players="5-2")
    await dispatcher.dispatch(interaction)
    assert "2-5" in interaction.last_reply
    assert guild.roles == []


# ==================== Create campaign ====================


def create_campaign(guild, *, guild_id=GUILD_ID, **values) -> FakeInteraction:
    values.setdefault("title", "Curse of Strahd")
    values.setdefault("regular_game_time", "Fridays 7pm")
    values.setdefault("game_name", "D&D 5e")
    return submit(guild, ModalKind.CREATE_CAMPAIGN, CreateCampaignPayload(guild_id), **values)


async def test_create_campaign_builds_role_record_and_channels(dispatcher, repos, server, guild):
    interaction = create_campaign(guild)

    await dispatcher.dispatch(interaction)

    (campaign,) = repos.campaigns.items.values()
    (role,) = guild.roles
    (category,) = guild.categories
    assert role.name.startswith("campaign-")
    assert campaign.discord_role_id == str(role.id)
    assert campaign.game_name == "D&D 5e"
    assert campaign.discord_category_id == str(category.id)
    assert [c.name for c in category.channels] == ["general", "logistics", "game"]
    assert "Curse of Strahd" in interaction.last_reply


async def test_create_campaign_deletes_role_when_insert_fails(dispatcher, repos, server, guild):
    repos.campaigns.raise_error = ConnectionRefusedError("database is down")
    interaction = create_campaign(guild)

    await dispatcher.dispatch(interaction)

    assert interaction.last_reply == messages.STORAGE_ERROR
    assert guild.roles[0].deleted
    assert guild.categories == []


async def test_create_campaign_reports_channel_failure(dispatcher, repos, server, guild):
    guild.channel_fail_after = 0
    interaction = create_campaign(guild)

    await dispatcher.dispatch(interaction)

    (campaign,) = repos.campaigns.items.values()
    assert campaign.discord_category_id is None
    assert "channels could not be created" in interaction.last_reply


async def test_create_campaign_from_other_guild_has_expired(dispatcher, repos, server, guild):
    interaction = create_campaign(guild, guild_id=OTHER_ID)
    await dispatcher.dispatch(interaction)
    assert interaction.last_reply == messages.FORM_EXPIRED
    assert guild.roles == []
