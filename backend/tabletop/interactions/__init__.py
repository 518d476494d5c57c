"""Custom-ID codec and interaction routing."""

from .codec import DECODE_FAILURE, MAX_CUSTOM_ID_LENGTH, DecodeFailure, decode, encode
from .dispatcher import InteractionDispatcher
from .intents import (
    AttendanceIntent,
    CreateCampaignPayload,
    GameSetupPayload,
    Intent,
    InterestIntent,
    ModalIntent,
    ModalKind,
    ScheduleGameDayPayload,
)

__all__ = [
    "AttendanceIntent",
    "CreateCampaignPayload",
    "DECODE_FAILURE",
    "DecodeFailure",
    "GameSetupPayload",
    "Intent",
    "InteractionDispatcher",
    "InterestIntent",
    "MAX_CUSTOM_ID_LENGTH",
    "ModalIntent",
    "ModalKind",
    "ScheduleGameDayPayload",
    "decode",
    "encode",
]
