"""Discord role membership and role creation."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Protocol

import discord

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class RoleSyncError(Exception):
    """Discord refused a role grant or revoke."""

    def __init__(self, message: str, *, actor_id: str, role_id: str):
        super().__init__(message)
        self.actor_id = actor_id
        self.role_id = role_id


class RoleGateway(Protocol):
    async def grant(self, actor_id: str, role_id: str, reason: str | None = None) -> bool: ...

    async def revoke(self, actor_id: str, role_id: str, reason: str | None = None) -> bool: ...


class DiscordRoleGateway:
    """Role edits against one guild.

    ``grant``/``revoke`` return whether anything changed. Granting a role the
    member already has, or revoking one they lack, makes no API call.
    """

    def __init__(self, guild: discord.Guild):
        self.guild = guild

    async def _member(self, actor_id: str, role_id: str) -> discord.Member | None:
        if member := self.guild.get_member(int(actor_id)):
            return member
        try:
            return await self.guild.fetch_member(int(actor_id))
        except discord.NotFound:
            return None
        except discord.HTTPException as e:
            raise RoleSyncError(
                f"Could not fetch member {actor_id}: {e}", actor_id=actor_id, role_id=role_id
            ) from e

    async def grant(self, actor_id: str, role_id: str, reason: str | None = None) -> bool:
        member = await self._member(actor_id, role_id)
        if member is None:
            raise RoleSyncError(
                f"Member {actor_id} is not in guild {self.guild.id}",
                actor_id=actor_id,
                role_id=role_id,
            )
        if member.get_role(int(role_id)) is not None:
            return False
        try:
            await member.add_roles(discord.Object(id=int(role_id)), reason=reason)
        except discord.HTTPException as e:
            raise RoleSyncError(
                f"Could not add role {role_id} to {actor_id}: {e}",
                actor_id=actor_id,
                role_id=role_id,
            ) from e
        logger.info(f"Added role {role_id} to user {actor_id}")
        return True

    async def revoke(self, actor_id: str, role_id: str, reason: str | None = None) -> bool:
        member = await self._member(actor_id, role_id)
        # A member who left the guild holds no roles
        if member is None or member.get_role(int(role_id)) is None:
            return False
        try:
            await member.remove_roles(discord.Object(id=int(role_id)), reason=reason)
        except discord.HTTPException as e:
            raise RoleSyncError(
                f"Could not remove role {role_id} from {actor_id}: {e}",
                actor_id=actor_id,
                role_id=role_id,
            ) from e
        logger.info(f"Removed role {role_id} from user {actor_id}")
        return True


# ==================== Role names ====================


def _slug(text: str, limit: int) -> str:
    return _NON_ALNUM.sub("", text)[:limit].lower()


def game_day_role_name(title: str, when: datetime) -> str:
    """``gameday-<first 10 alnum of title>-<MMDDYY>``"""
    return f"gameday-{_slug(title, 10)}-{when:%m%d%y}"


def campaign_role_name(name: str) -> str:
    """``campaign-<first 15 alnum of name>``"""
    return f"campaign-{_slug(name, 15)}"


_ROLE_MENTION_RE = re.compile(r"<@&([0-9]{17,19})>|([0-9]{17,19})")


def parse_role_reference(text: str) -> str | None:
    """Role ID from a ``<@&id>`` mention or a bare ID, else None."""
    match = _ROLE_MENTION_RE.fullmatch(text.strip())
    if not match:
        return None
    return match.group(1) or match.group(2)


def resolve_role(guild: discord.Guild, text: str) -> discord.Role | None:
    """Find a role by mention, ID or exact (case-insensitive) name."""
    if role_id := parse_role_reference(text):
        return guild.get_role(int(role_id))
    wanted = text.strip().lower()
    return next((r for r in guild.roles if r.name.lower() == wanted), None)


async def create_role(guild: discord.Guild, name: str, reason: str) -> discord.Role:
    """Create a role that can view channels. Raises discord.HTTPException."""
    role = await guild.create_role(
        name=name,
        permissions=discord.Permissions(view_channel=True),
        reason=reason,
    )
    logger.info(f"Created role {role.id} ({name}) in guild {guild.id}")
    return role
