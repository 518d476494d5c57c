"""Decoded meanings of button and modal custom IDs.

Intents are built fresh for every outbound component and thrown away after
the callback is decoded. Only their effects are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from shared.models.enums import AttendanceStatus


class ModalKind(str, Enum):
    GAME_SETUP = "game_setup"
    SCHEDULE_GAME_DAY = "schedule_game_day"
    CREATE_CAMPAIGN = "create_campaign"


@dataclass(frozen=True)
class AttendanceIntent:
    """RSVP button on a game day announcement."""

    subject_id: str
    status: AttendanceStatus
    # Creation time in ms, kept only so two otherwise equal IDs differ
    issued_at: int | None = field(default=None, compare=False)

    @property
    def kind(self) -> str:
        return "attendance"


@dataclass(frozen=True)
class InterestIntent:
    """Interest button on a campaign announcement."""

    subject_id: str
    issued_at: int | None = field(default=None, compare=False)

    @property
    def kind(self) -> str:
        return "campaign_interest"


@dataclass(frozen=True)
class GameSetupPayload:
    guild_id: str
    role_id: str | None = None


@dataclass(frozen=True)
class ScheduleGameDayPayload:
    guild_id: str
    host_id: str
    game_role_id: str | None = None


@dataclass(frozen=True)
class CreateCampaignPayload:
    guild_id: str
    game_role_id: str | None = None


ModalPayload = Union[GameSetupPayload, ScheduleGameDayPayload, CreateCampaignPayload]

_PAYLOAD_TYPES: dict[ModalKind, type] = {
    ModalKind.GAME_SETUP: GameSetupPayload,
    ModalKind.SCHEDULE_GAME_DAY: ScheduleGameDayPayload,
    ModalKind.CREATE_CAMPAIGN: CreateCampaignPayload,
}


@dataclass(frozen=True)
class ModalIntent:
    """Submission of one of the bot's modals.

    Only identifiers travel in the payload. Free text such as role names is
    carried in prefilled text inputs of the modal itself.
    """

    modal: ModalKind
    payload: ModalPayload
    issued_at: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.modal]
        if not isinstance(self.payload, expected):
            raise TypeError(
                f"{self.modal.value} modal expects {expected.__name__}, "
                f"got {type(self.payload).__name__}"
            )

    @property
    def kind(self) -> str:
        return f"modal:{self.modal.value}"

    @property
    def subject_id(self) -> str:
        return self.payload.guild_id


Intent = Union[AttendanceIntent, InterestIntent, ModalIntent]
