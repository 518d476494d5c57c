"""Custom-ID codec for buttons and modals.

Discord caps a component custom ID at 100 characters, so intents are packed
into a positional ``:``-delimited string::

    <tag>:<issued_at base36 ms>:<field>:<field>...

    att  status(A|I|N)  game_day_id                      attendance button
    ci   campaign_id                                     campaign interest
    gs   guild_id  role_id?                              game setup modal
    gds  guild_id  host_id  game_role_id?                schedule modal
    cc   guild_id  game_role_id?                         create campaign modal

Discord IDs are zero-padded to 19 digits and an absent optional ID is written
as ``-``. With every trailing field fixed-width and an exact field count per
tag, no strict prefix of a valid ID decodes.

:func:`decode` also accepts the encodings this one superseded: the JSON button
IDs (``{"command": "attendance", ...}``) and ``attendance_<STATUS>_<id>``.
"""

from __future__ import annotations

import json
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from shared.models.enums import AttendanceStatus

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
from .validation import is_discord_id, is_uuid, parse_enum

MAX_CUSTOM_ID_LENGTH = 100
DELIMITER = ":"

_TIMESTAMP_RE = re.compile(r"[0-9a-z]{1,12}")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class DecodeFailure:
    """Returned by :func:`decode` for anything it cannot turn into an intent."""

    _instance: DecodeFailure | None = None

    def __new__(cls) -> DecodeFailure:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DECODE_FAILURE"


DECODE_FAILURE = DecodeFailure()


class _Invalid(ValueError):
    pass


# ==================== Field codecs ====================


@dataclass(frozen=True)
class _Field:
    name: str
    dump: Callable[[Any], str]
    load: Callable[[str], Any]


def _load_uuid(raw: str) -> str:
    if not is_uuid(raw):
        raise _Invalid(raw)
    return raw.lower()


SNOWFLAKE_WIDTH = 19
ABSENT = "-"


def _dump_snowflake(value: str) -> str:
    return str(value).zfill(SNOWFLAKE_WIDTH)


def _load_snowflake(raw: str) -> str:
    if len(raw) != SNOWFLAKE_WIDTH:
        raise _Invalid(raw)
    value = raw.lstrip("0")
    if not is_discord_id(value):
        raise _Invalid(raw)
    return value


def _load_optional_snowflake(raw: str) -> str | None:
    return None if raw == ABSENT else _load_snowflake(raw)


_STATUS_CODES = {
    AttendanceStatus.AVAILABLE: "A",
    AttendanceStatus.INTERESTED: "I",
    AttendanceStatus.NOT_AVAILABLE: "N",
}
_STATUS_BY_CODE = {code: status for status, code in _STATUS_CODES.items()}


def _load_status(raw: str) -> AttendanceStatus:
    try:
        return _STATUS_BY_CODE[raw]
    except KeyError:
        raise _Invalid(raw) from None


def _uuid(name: str) -> _Field:
    return _Field(name, str, _load_uuid)


def _snowflake(name: str) -> _Field:
    return _Field(name, _dump_snowflake, _load_snowflake)


def _optional_snowflake(name: str) -> _Field:
    return _Field(
        name, lambda v: ABSENT if v is None else _dump_snowflake(v), _load_optional_snowflake
    )


# ==================== Format table ====================


@dataclass(frozen=True)
class _Format:
    tag: str
    fields: tuple[_Field, ...]
    build: Callable[[dict[str, Any], int | None], Intent]
    source: Callable[[Intent], Any]

    @property
    def part_count(self) -> int:
        return 2 + len(self.fields)


_ATTENDANCE = _Format(
    tag="att",
    fields=(_Field("status", _STATUS_CODES.__getitem__, _load_status), _uuid("subject_id")),
    build=lambda v, ts: AttendanceIntent(v["subject_id"], v["status"], issued_at=ts),
    source=lambda intent: intent,
)
_INTEREST = _Format(
    tag="ci",
    fields=(_uuid("subject_id"),),
    build=lambda v, ts: InterestIntent(v["subject_id"], issued_at=ts),
    source=lambda intent: intent,
)
_GAME_SETUP = _Format(
    tag="gs",
    fields=(_snowflake("guild_id"), _optional_snowflake("role_id")),
    build=lambda v, ts: ModalIntent(ModalKind.GAME_SETUP, GameSetupPayload(**v), issued_at=ts),
    source=lambda intent: intent.payload,
)
_SCHEDULE_GAME_DAY = _Format(
    tag="gds",
    fields=(_snowflake("guild_id"), _snowflake("host_id"), _optional_snowflake("game_role_id")),
    build=lambda v, ts: ModalIntent(
        ModalKind.SCHEDULE_GAME_DAY, ScheduleGameDayPayload(**v), issued_at=ts
    ),
    source=lambda intent: intent.payload,
)
_CREATE_CAMPAIGN = _Format(
    tag="cc",
    fields=(_snowflake("guild_id"), _optional_snowflake("game_role_id")),
    build=lambda v, ts: ModalIntent(
        ModalKind.CREATE_CAMPAIGN, CreateCampaignPayload(**v), issued_at=ts
    ),
    source=lambda intent: intent.payload,
)

_FORMATS_BY_TAG: dict[str, _Format] = {
    f.tag: f for f in (_ATTENDANCE, _INTEREST, _GAME_SETUP, _SCHEDULE_GAME_DAY, _CREATE_CAMPAIGN)
}
_MODAL_FORMATS: dict[ModalKind, _Format] = {
    ModalKind.GAME_SETUP: _GAME_SETUP,
    ModalKind.SCHEDULE_GAME_DAY: _SCHEDULE_GAME_DAY,
    ModalKind.CREATE_CAMPAIGN: _CREATE_CAMPAIGN,
}


def _format_for(intent: Intent) -> _Format:
    if isinstance(intent, AttendanceIntent):
        return _ATTENDANCE
    if isinstance(intent, InterestIntent):
        return _INTEREST
    if isinstance(intent, ModalIntent):
        return _MODAL_FORMATS[intent.modal]
    raise TypeError(f"Not an intent: {intent!r}")


def _to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


# ==================== Public API ====================


def encode(intent: Intent, *, now_ms: int | None = None) -> str:
    """Serialize *intent* into a custom ID.

    ``issued_at`` on the intent is ignored; every call stamps the current
    time (or *now_ms*) so two components built from the same intent differ.
    """
    fmt = _format_for(intent)
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    source = fmt.source(intent)
    parts = [fmt.tag, _to_base36(stamp)]
    parts.extend(f.dump(getattr(source, f.name)) for f in fmt.fields)
    custom_id = DELIMITER.join(parts)
    if len(custom_id) > MAX_CUSTOM_ID_LENGTH:
        raise ValueError(
            f"Custom ID for {fmt.tag} is {len(custom_id)} chars "
            f"(limit {MAX_CUSTOM_ID_LENGTH})"
        )
    return custom_id


def decode(custom_id: object) -> Intent | DecodeFailure:
    """Parse a custom ID back into an intent.

    Never raises. Anything malformed, forged or unrecognised yields
    :data:`DECODE_FAILURE`.
    """
    if not isinstance(custom_id, str) or not custom_id:
        return DECODE_FAILURE
    if len(custom_id) > MAX_CUSTOM_ID_LENGTH:
        return DECODE_FAILURE

    try:
        if custom_id.startswith("{"):
            return _decode_legacy_json(custom_id)
        if custom_id.startswith("attendance_"):
            return _decode_legacy_attendance(custom_id)
        return _decode_compact(custom_id)
    except (_Invalid, TypeError):
        return DECODE_FAILURE


def _decode_compact(custom_id: str) -> Intent | DecodeFailure:
    tag, sep, _ = custom_id.partition(DELIMITER)
    fmt = _FORMATS_BY_TAG.get(tag)
    if fmt is None or not sep:
        return DECODE_FAILURE

    parts = custom_id.split(DELIMITER)
    if len(parts) != fmt.part_count:
        return DECODE_FAILURE

    stamp = parts[1]
    if not _TIMESTAMP_RE.fullmatch(stamp):
        return DECODE_FAILURE

    values = {f.name: f.load(raw) for f, raw in zip(fmt.fields, parts[2:])}
    return fmt.build(values, int(stamp, 36))


def _decode_legacy_attendance(custom_id: str) -> Intent | DecodeFailure:
    # attendance_<STATUS>_<id>; NOT_AVAILABLE splits into an extra part
    parts = custom_id.split("_")
    if len(parts) == 3:
        raw_status, subject_id = parts[1], parts[2]
    elif len(parts) == 4:
        raw_status, subject_id = f"{parts[1]}_{parts[2]}", parts[3]
    else:
        return DECODE_FAILURE

    status = parse_enum(AttendanceStatus, raw_status)
    if status is None:
        return DECODE_FAILURE
    return AttendanceIntent(_load_uuid(subject_id), status)


def _decode_legacy_json(custom_id: str) -> Intent | DecodeFailure:
    try:
        data = json.loads(custom_id)
    except (ValueError, RecursionError):
        return DECODE_FAILURE
    if not isinstance(data, dict):
        return DECODE_FAILURE

    command = data.get("command")
    if command == "attendance":
        status = parse_enum(AttendanceStatus, data.get("status"))
        game_day_id = data.get("gameDayId")
        if status is None or not is_uuid(game_day_id):
            return DECODE_FAILURE
        return AttendanceIntent(game_day_id.lower(), status)

    if command == "campaign_interest":
        campaign_id = data.get("campaignId")
        if not is_uuid(campaign_id):
            return DECODE_FAILURE
        return InterestIntent(campaign_id.lower())

    return DECODE_FAILURE
