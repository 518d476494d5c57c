from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import discord
import pytest

from shared.models import (
    Attendance,
    Campaign,
    Game,
    GameDay,
    GameDayStatus,
    Player,
    PlayerStatus,
)
from tabletop.services.roles import RoleSyncError

GUILD_ID = "123456789012345678"
ACTOR_ID = "234567890123456789"
ROLE_ID = "345678901234567890"


def new_id() -> str:
    return str(uuid.uuid4())


def http_error(cls: type[discord.HTTPException] = discord.Forbidden, status: int = 403):
    response = SimpleNamespace(status=status, reason="error")
    return cls(response, {"message": "Missing Permissions", "code": 50013})


# ==================== Persistence fakes ====================


class FakeAttendanceStore:
    """Upserts keyed by (game_day_id, user_id), like the UNIQUE constraint."""

    def __init__(self):
        self.records: dict[tuple[str, str], Attendance] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.raise_error: BaseException | None = None
        self.return_none = False

    async def upsert_status(self, game_day_id: str, user_id: str, status):
        self.calls.append((game_day_id, user_id, status))
        if self.raise_error is not None:
            raise self.raise_error
        if self.return_none:
            return None
        key = (game_day_id, user_id)
        existing = self.records.get(key)
        record = Attendance(
            id=existing.id if existing else new_id(),
            game_day_id=game_day_id,
            user_id=user_id,
            status=status,
        )
        self.records[key] = record
        return record

    async def list_for_game_day(self, game_day_id: str) -> list[Attendance]:
        return [r for (gd, _), r in self.records.items() if gd == game_day_id]


class FakePlayerStore:
    def __init__(self):
        self.records: dict[tuple[str, str], Player] = {}

    async def upsert_status(self, campaign_id: str, user_id: str, status):
        key = (campaign_id, user_id)
        existing = self.records.get(key)
        if existing and existing.status is PlayerStatus.CONFIRMED:
            return existing
        record = Player(id=new_id(), campaign_id=campaign_id, user_id=user_id, status=status)
        self.records[key] = record
        return record

    async def list_for_campaign(self, campaign_id: str) -> list[Player]:
        return [r for (c, _), r in self.records.items() if c == campaign_id]


class FakeGameDays:
    def __init__(self):
        self.items: dict[str, GameDay] = {}
        self.raise_error: BaseException | None = None

    def add(self, **fields) -> GameDay:
        defaults = {
            "id": new_id(),
            "title": "Board Game Night",
            "date_time": datetime.now(timezone.utc) + timedelta(days=3),
            "discord_role_id": ROLE_ID,
        }
        defaults.update(fields)
        game_day = GameDay(**defaults)
        self.items[game_day.id] = game_day
        return game_day

    async def get(self, game_day_id: str):
        return self.items.get(game_day_id)

    async def create_draft(self, **fields) -> GameDay:
        if self.raise_error is not None:
            raise self.raise_error
        game_day = GameDay(id=new_id(), **fields)
        self.items[game_day.id] = game_day
        return game_day

    async def update(self, game_day_id: str, **changes):
        game_day = self.items.get(game_day_id)
        if game_day is None:
            return None
        for key, value in changes.items():
            setattr(game_day, key, value)
        game_day.status = GameDayStatus(game_day.status)
        return game_day


class FakeCampaigns:
    def __init__(self):
        self.items: dict[str, Any] = {}
        self.raise_error: BaseException | None = None

    async def get(self, campaign_id: str):
        return self.items.get(campaign_id)

    async def create(self, **fields) -> Campaign:
        if self.raise_error is not None:
            raise self.raise_error
        campaign = Campaign(id=new_id(), **fields)
        self.items[campaign.id] = campaign
        return campaign

    async def set_category(self, campaign_id: str, category_id: str):
        self.items[campaign_id].discord_category_id = category_id
        return self.items[campaign_id]


class FakeUsers:
    def __init__(self):
        self.seen: dict[str, str] = {}

    async def get_or_create(self, discord_id: str, username: str, server_id=None):
        self.seen[discord_id] = username
        return SimpleNamespace(discord_id=discord_id, username=username, server_id=server_id)


class FakeServers:
    def __init__(self):
        self.items: dict[str, Any] = {}

    async def get_by_discord_id(self, discord_id: str):
        return self.items.get(discord_id)


class FakeGames:
    def __init__(self):
        self.items: dict[str, Game] = {}
        self.raise_error: BaseException | None = None

    async def get(self, game_id):
        return self.items.get(game_id)

    async def get_by_role_id(self, role_id):
        return next((g for g in self.items.values() if g.discord_role_id == role_id), None)

    async def create(self, **fields) -> Game:
        if self.raise_error is not None:
            raise self.raise_error
        game = Game(id=new_id(), **fields)
        self.items[game.id] = game
        return game


@pytest.fixture
def repos():
    return SimpleNamespace(
        servers=FakeServers(),
        users=FakeUsers(),
        games=FakeGames(),
        game_days=FakeGameDays(),
        attendances=FakeAttendanceStore(),
        campaigns=FakeCampaigns(),
        players=FakePlayerStore(),
    )


# ==================== Discord fakes ====================


class RecordingRoleGateway:
    """Tracks who holds which role; grant/revoke are no-ops when already in that state."""

    def __init__(self):
        self.held: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str, str]] = []
        self.fail = False

    async def grant(self, actor_id: str, role_id: str, reason: str | None = None) -> bool:
        self.calls.append(("grant", actor_id, role_id))
        if self.fail:
            raise RoleSyncError("denied", actor_id=actor_id, role_id=role_id)
        if (actor_id, role_id) in self.held:
            return False
        self.held.add((actor_id, role_id))
        return True

    async def revoke(self, actor_id: str, role_id: str, reason: str | None = None) -> bool:
        self.calls.append(("revoke", actor_id, role_id))
        if self.fail:
            raise RoleSyncError("denied", actor_id=actor_id, role_id=role_id)
        if (actor_id, role_id) not in self.held:
            return False
        self.held.discard((actor_id, role_id))
        return True


@pytest.fixture
def role_gateway():
    return RecordingRoleGateway()


_snowflakes = itertools.count(400000000000000001)


class FakeRole:
    def __init__(self, name: str, role_id: int | None = None):
        self.id = role_id or next(_snowflakes)
        self.name = name
        self.mention = f"<@&{self.id}>"
        self.deleted = False

    async def delete(self, reason=None):
        self.deleted = True


class FakeChannel:
    def __init__(self, name: str):
        self.id = next(_snowflakes)
        self.name = name
        self.deleted = False

    async def delete(self, reason=None):
        self.deleted = True


class FakeCategory(FakeChannel):
    """Raises on the channel after ``fail_after`` have been created."""

    def __init__(self, name: str, fail_after: int | None = None):
        super().__init__(name)
        self.channels: list[FakeChannel] = []
        self.fail_after = fail_after

    async def create_text_channel(self, name: str, topic=None):
        if self.fail_after is not None and len(self.channels) >= self.fail_after:
            raise http_error(discord.HTTPException, 500)
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel


class FakeGuild:
    """Records the roles, categories and events a handler builds."""

    def __init__(self, guild_id: str = GUILD_ID):
        self.id = int(guild_id)
        self.default_role = FakeRole("@everyone", self.id)
        self.me = None
        self.roles: list[FakeRole] = []
        self.categories: list[FakeCategory] = []
        self.events: list[dict] = []
        self.channel_fail_after: int | None = None
        self.event_error: BaseException | None = None

    def get_role(self, role_id: int):
        return next((r for r in self.roles if r.id == role_id), None)

    async def create_role(self, *, name: str, permissions=None, reason=None):
        role = FakeRole(name)
        self.roles.append(role)
        return role

    async def create_category(self, name: str, *, overwrites=None, reason=None):
        category = FakeCategory(name, self.channel_fail_after)
        self.categories.append(category)
        return category

    async def create_scheduled_event(self, **kwargs):
        if self.event_error is not None:
            raise self.event_error
        self.events.append(kwargs)
        event_id = next(_snowflakes)
        return SimpleNamespace(id=event_id, url=f"https://discord.com/events/{self.id}/{event_id}")

    def get_channel(self, channel_id: int):
        return None

    async def fetch_channel(self, channel_id: int):
        raise http_error(discord.NotFound, 404)

    def get_member(self, user_id: int):
        return None


def modal_data(custom_id: str, **values: str) -> dict:
    """A modal_submit payload with one action row per text input."""
    return {
        "custom_id": custom_id,
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": key, "value": value}]}
            for key, value in values.items()
        ],
    }


class FakeResponse:
    def __init__(self):
        self._done = False
        self.deferred: dict | None = None
        self.messages: list[dict] = []
        self.modals: list[Any] = []
        self.raise_on_send: BaseException | None = None

    def is_done(self) -> bool:
        return self._done

    async def defer(self, *, ephemeral: bool = False, thinking: bool = False):
        self._done = True
        self.deferred = {"ephemeral": ephemeral, "thinking": thinking}

    async def send_message(self, content=None, *, ephemeral: bool = False, **kwargs):
        if self.raise_on_send is not None:
            raise self.raise_on_send
        self._done = True
        self.messages.append({"content": content, "ephemeral": ephemeral, **kwargs})

    async def send_modal(self, modal):
        self._done = True
        self.modals.append(modal)


class FakeFollowup:
    def __init__(self):
        self.messages: list[dict] = []

    async def send(self, content=None, *, ephemeral: bool = False, **kwargs):
        self.messages.append({"content": content, "ephemeral": ephemeral, **kwargs})


class FakeInteraction:
    def __init__(self, data: dict | None = None, *, guild=None, user_id: str = ACTOR_ID):
        self.data = data or {}
        self.type = discord.InteractionType.component
        self.user = SimpleNamespace(id=int(user_id), name="tester")
        self.guild = guild if guild is not None else SimpleNamespace(id=int(GUILD_ID))
        self.guild_id = self.guild.id if self.guild else None
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.edits: list[dict] = []

    async def edit_original_response(self, **kwargs):
        self.edits.append(kwargs)

    @property
    def last_reply(self) -> str:
        if self.edits:
            return self.edits[-1].get("content") or ""
        if self.followup.messages:
            return self.followup.messages[-1].get("content") or ""
        if self.response.messages:
            return self.response.messages[-1].get("content") or ""
        return ""


@pytest.fixture
def make_interaction():
    def _make(custom_id: str | None = None, **kwargs) -> FakeInteraction:
        data = {"custom_id": custom_id, "component_type": 2} if custom_id is not None else {}
        return FakeInteraction(data, **kwargs)

    return _make
