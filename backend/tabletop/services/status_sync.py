"""Keeps Discord role membership in line with a stored status.

For one (subject, actor) pair a status change is two steps, in order:

1. persist the status (upsert, last write wins)
2. grant or revoke the subject's role to match it

If step 1 fails, step 2 never runs, so role state never gets ahead of what
is stored. If step 2 fails, the stored status stands and the result is a
degraded success. After any stored change an optional ``on_change`` hook runs
as a best-effort step, typically to refresh an announcement tally.

Two rapid changes by the same actor race: the last write wins in the
database while each task reconciles the role from its own status, so the
role can briefly disagree with the stored status until the next change.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from shared.database import PERSISTENCE_ERRORS
from shared.models.enums import AttendanceStatus, PlayerStatus

from .roles import RoleGateway, RoleSyncError
from .side_effects import best_effort

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)


class Subject(Protocol):
    """Anything members hold a status on; game days and campaigns qualify."""

    id: str
    discord_role_id: str | None


class StatusStore(Protocol[S]):
    async def upsert_status(self, subject_id: str, actor_id: str, status: S) -> Any | None: ...


class SyncOutcome(Enum):
    SAVED = "saved"
    ROLE_FAILED = "role_failed"
    NOT_SAVED = "not_saved"


@dataclass(frozen=True)
class SyncResult:
    outcome: SyncOutcome
    record: Any = None
    error: BaseException | None = None

    @property
    def saved(self) -> bool:
        return self.outcome is not SyncOutcome.NOT_SAVED


OnChange = Callable[[Any, str, Any], Awaitable[None]]


class StatusSynchronizer(Generic[S]):
    def __init__(
        self,
        store: StatusStore[S],
        roles: RoleGateway,
        grants_role: Callable[[S], bool],
        on_change: OnChange | None = None,
    ) -> None:
        self.store = store
        self.roles = roles
        self.grants_role = grants_role
        self.on_change = on_change

    async def set_status(self, subject: Subject, actor_id: str, status: S) -> SyncResult:
        try:
            record = await self.store.upsert_status(subject.id, actor_id, status)
        except PERSISTENCE_ERRORS as e:
            logger.error(
                f"Failed to store {status.value} for {actor_id} on {subject.id}: "
                f"{type(e).__name__}: {e}"
            )
            return SyncResult(SyncOutcome.NOT_SAVED, error=e)

        if record is None:
            logger.error(f"Store returned nothing for {actor_id} on {subject.id}")
            return SyncResult(SyncOutcome.NOT_SAVED)

        result = SyncResult(SyncOutcome.SAVED, record)
        if subject.discord_role_id:
            try:
                await self._reconcile_role(subject.discord_role_id, actor_id, status)
            except RoleSyncError as e:
                logger.warning(f"Status stored but role sync failed for {actor_id}: {e}")
                result = SyncResult(SyncOutcome.ROLE_FAILED, record, e)

        if self.on_change is not None:
            await best_effort(
                self.on_change(subject, actor_id, status), f"after status change on {subject.id}"
            )
        return result

    async def _reconcile_role(self, role_id: str, actor_id: str, status: S) -> None:
        if self.grants_role(status):
            await self.roles.grant(actor_id, role_id, reason=f"Status set to {status.value}")
        else:
            await self.roles.revoke(actor_id, role_id, reason=f"Status set to {status.value}")


def attendance_grants_role(status: AttendanceStatus) -> bool:
    return status is AttendanceStatus.AVAILABLE


def player_grants_role(status: PlayerStatus) -> bool:
    return status in (PlayerStatus.INTERESTED, PlayerStatus.CONFIRMED)


def game_day_synchronizer(
    store: StatusStore[AttendanceStatus],
    roles: RoleGateway,
    on_change: OnChange | None = None,
) -> StatusSynchronizer[AttendanceStatus]:
    return StatusSynchronizer(store, roles, attendance_grants_role, on_change)


def campaign_synchronizer(
    store: StatusStore[PlayerStatus],
    roles: RoleGateway,
    on_change: OnChange | None = None,
) -> StatusSynchronizer[PlayerStatus]:
    return StatusSynchronizer(store, roles, player_grants_role, on_change)
