"""Handlers the interaction dispatcher routes decoded intents to."""

from __future__ import annotations

from datetime import tzinfo

from shared.repositories import Repositories

from ..interactions.dispatcher import IntentHandler, InteractionDispatcher, LegacyHandler
from .attendance import AttendanceButtonHandler
from .create_campaign import CreateCampaignHandler
from .game_setup import GameSetupHandler
from .interest import CampaignInterestHandler
from .legacy import ExpiredFormHandler
from .schedule_game_day import ScheduleGameDayHandler


def build_handlers(repos: Repositories, tz: tzinfo) -> list[IntentHandler]:
    return [
        AttendanceButtonHandler(repos),
        CampaignInterestHandler(repos),
        GameSetupHandler(repos),
        ScheduleGameDayHandler(repos, tz),
        CreateCampaignHandler(repos),
    ]


def build_legacy_handlers() -> list[LegacyHandler]:
    return [ExpiredFormHandler()]


def build_dispatcher(repos: Repositories, tz: tzinfo) -> InteractionDispatcher:
    return InteractionDispatcher(build_handlers(repos, tz), build_legacy_handlers())


__all__ = [
    "AttendanceButtonHandler",
    "CampaignInterestHandler",
    "CreateCampaignHandler",
    "ExpiredFormHandler",
    "GameSetupHandler",
    "ScheduleGameDayHandler",
    "build_dispatcher",
    "build_handlers",
    "build_legacy_handlers",
]
