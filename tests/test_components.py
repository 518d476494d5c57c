"""Announcement buttons, modal forms and which interactions reach the dispatcher."""

from types import SimpleNamespace

import discord
import pytest
from conftest import GUILD_ID, new_id

from shared.models import AttendanceStatus
from tabletop.cogs.interactions import should_dispatch
from tabletop.interactions import (
    AttendanceIntent,
    GameSetupPayload,
    InterestIntent,
    ModalIntent,
    ModalKind,
    ScheduleGameDayPayload,
    decode,
)
from tabletop.interactions.components import attendance_view, interest_view
from tabletop.interactions.modals import (
    GameSetupModal,
    ScheduleGameDayModal,
    extract_values,
)


# Views and modals need a running loop, hence async tests


async def test_attendance_view_buttons_decode_to_their_status():
    game_day_id = new_id()
    view = attendance_view(game_day_id)

    decoded = [decode(item.custom_id) for item in view.children]

    assert decoded == [
        AttendanceIntent(game_day_id, AttendanceStatus.AVAILABLE),
        AttendanceIntent(game_day_id, AttendanceStatus.INTERESTED),
        AttendanceIntent(game_day_id, AttendanceStatus.NOT_AVAILABLE),
    ]
    assert view.timeout is None
    assert [item.label for item in view.children] == ["I'm in", "I'm interested", "Not available"]


async def test_interest_view_button():
    campaign_id = new_id()
    (button,) = interest_view(campaign_id).children
    assert decode(button.custom_id) == InterestIntent(campaign_id)


async def test_modal_custom_id_carries_intent():
    intent = ModalIntent(ModalKind.GAME_SETUP, GameSetupPayload(GUILD_ID))
    modal = GameSetupModal(intent, role_name="Catan Players")

    assert decode(modal.custom_id) == intent
    assert modal.role_name.default == "Catan Players"


async def test_modal_rejects_other_intent_kind():
    intent = ModalIntent(ModalKind.GAME_SETUP, GameSetupPayload(GUILD_ID))
    with pytest.raises(ValueError):
        ScheduleGameDayModal(intent)


async def test_schedule_modal_accepts_its_intent():
    intent = ModalIntent(
        ModalKind.SCHEDULE_GAME_DAY, ScheduleGameDayPayload(GUILD_ID, "234567890123456789")
    )
    modal = ScheduleGameDayModal(intent)
    assert decode(modal.custom_id) == intent


# ==================== Submitted values ====================


def test_extract_values_from_action_rows():
    data = {
        "custom_id": "gds:1:x",
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": "title", "value": "Catan"}]},
            {"type": 1, "components": [{"type": 4, "custom_id": "location", "value": ""}]},
        ],
    }
    assert extract_values(data) == {"title": "Catan", "location": ""}


def test_extract_values_from_label_wrapped_inputs():
    data = {
        "components": [
            {"type": 18, "component": {"type": 4, "custom_id": "role_name", "value": "gamers"}},
        ]
    }
    assert extract_values(data) == {"role_name": "gamers"}


@pytest.mark.parametrize("data", [None, {}, {"components": None}, {"components": ["junk", 3]}])
def test_extract_values_tolerates_odd_payloads(data):
    assert extract_values(data) == {}


# ==================== Routing filter ====================


@pytest.mark.parametrize(
    "kind,data,expected",
    [
        (discord.InteractionType.modal_submit, {"custom_id": "x"}, True),
        (discord.InteractionType.component, {"component_type": 2}, True),
        (discord.InteractionType.component, {"component_type": 3}, False),
        (discord.InteractionType.application_command, {"name": "ping"}, False),
        (discord.InteractionType.autocomplete, {}, False),
    ],
)
def test_should_dispatch(kind, data, expected):
    interaction = SimpleNamespace(type=kind, data=data)
    assert should_dispatch(interaction) is expected
