"""Routes component and modal callbacks to the handler that owns them."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

import discord

from .codec import decode
from .intents import Intent

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while handling that. Please try again later."


class IntentHandler(Protocol):
    def can_handle(self, intent: Intent) -> bool: ...

    async def handle(self, interaction: discord.Interaction, intent: Intent) -> None: ...


class LegacyHandler(Protocol):
    """Owns raw custom IDs from before the codec existed."""

    def matches(self, custom_id: str) -> bool: ...

    async def handle(self, interaction: discord.Interaction, custom_id: str) -> None: ...


def custom_id_of(interaction: discord.Interaction) -> str | None:
    data = interaction.data or {}
    custom_id = data.get("custom_id")
    return custom_id if isinstance(custom_id, str) else None


class InteractionDispatcher:
    """Single entry point for button presses and modal submissions.

    Handlers are tried in registration order and the first whose
    ``can_handle`` accepts the intent wins. A handler failure is logged and
    turned into an ephemeral notice; it never reaches the gateway loop.
    """

    def __init__(
        self,
        handlers: Sequence[IntentHandler],
        legacy_handlers: Sequence[LegacyHandler] = (),
    ) -> None:
        self._handlers = tuple(handlers)
        self._legacy_handlers = tuple(legacy_handlers)

    def handler_for(self, intent: Intent) -> IntentHandler | None:
        matches = [h for h in self._handlers if h.can_handle(intent)]
        if len(matches) > 1:
            names = ", ".join(type(h).__name__ for h in matches)
            logger.error(f"Overlapping handlers for {intent.kind}: {names}")
        return matches[0] if matches else None

    async def dispatch(self, interaction: discord.Interaction) -> bool:
        """Handle one callback. Returns whether any handler ran."""
        custom_id = custom_id_of(interaction)
        if custom_id is None:
            return False

        intent = decode(custom_id)
        if not intent:
            legacy = next((h for h in self._legacy_handlers if h.matches(custom_id)), None)
            if legacy is None:
                logger.debug(f"Ignoring unrecognised custom id {custom_id!r}")
                return False
            await self._run(
                interaction,
                lambda: legacy.handle(interaction, custom_id),
                kind="legacy",
                subject=custom_id,
            )
            return True

        handler = self.handler_for(intent)
        if handler is None:
            logger.warning(f"No handler registered for {intent.kind}")
            return False

        await self._run(
            interaction,
            lambda: handler.handle(interaction, intent),
            kind=intent.kind,
            subject=intent.subject_id,
        )
        return True

    async def _run(
        self,
        interaction: discord.Interaction,
        call: Callable[[], Awaitable[None]],
        *,
        kind: str,
        subject: str,
    ) -> None:
        try:
            await call()
        except Exception:
            logger.exception(
                f"Handler failed: kind={kind} actor={interaction.user.id} subject={subject}"
            )
            await self._notify_failure(interaction)

    @staticmethod
    async def _notify_failure(interaction: discord.Interaction) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(GENERIC_FAILURE_MESSAGE, ephemeral=True)
            else:
                await interaction.response.send_message(GENERIC_FAILURE_MESSAGE, ephemeral=True)
        except discord.HTTPException as e:
            # Interaction expired or was already answered
            logger.warning(f"Could not deliver failure notice: {e}")
