"""Embed builders for announcements and listings."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import discord

from shared.models import (
    Attendance,
    AttendanceStatus,
    Campaign,
    Game,
    GameDay,
    GameDayStatus,
    Player,
)

_STATUS_COLORS = {
    GameDayStatus.SCHEDULING: discord.Color.gold(),
    GameDayStatus.CLOSED: discord.Color.green(),
    GameDayStatus.CANCELLED: discord.Color.red(),
}

_TALLY_FIELDS = (
    (AttendanceStatus.AVAILABLE, "✅ Attending"),
    (AttendanceStatus.INTERESTED, "🤔 Interested"),
    (AttendanceStatus.NOT_AVAILABLE, "❌ Not available"),
)


FIELD_VALUE_LIMIT = 1024


def _mentions(user_ids: Iterable[str]) -> str:
    """Space-joined mentions, cut on whole mentions to fit one field value."""
    mentions = [f"<@{uid}>" for uid in user_ids]
    if not mentions:
        return "No one yet"
    shown: list[str] = []
    length = 0
    for index, mention in enumerate(mentions):
        rest = len(mentions) - index - 1
        suffix = f" and {rest} more" if rest else ""
        needed = length + (1 if shown else 0) + len(mention)
        if needed + len(suffix) > FIELD_VALUE_LIMIT:
            hidden = len(mentions) - len(shown)
            return " ".join(shown) + f" and {hidden} more"
        shown.append(mention)
        length = needed
    return " ".join(shown)


def _players_range(game: Game) -> str:
    low = game.min_players if game.min_players is not None else "?"
    high = game.max_players if game.max_players is not None else "?"
    return f"{low}-{high}"


def game_day_embed(
    game_day: GameDay,
    attendances: Sequence[Attendance] = (),
    game: Game | None = None,
    event_url: str | None = None,
) -> discord.Embed:
    embed = discord.Embed(title=game_day.title, color=_STATUS_COLORS[game_day.status])

    if game_day.status is GameDayStatus.CANCELLED:
        embed.description = "This game day has been cancelled."
        return embed
    if game_day.status is GameDayStatus.CLOSED:
        embed.description = "This game day has been closed, and is not taking any more RSVPs."
        return embed

    embed.description = game_day.description or "No description provided"
    if game:
        embed.add_field(
            name="Game",
            value=f"{game.name} ({game.short_name}) | Players: {_players_range(game)}",
            inline=False,
        )

    when = discord.utils.format_dt(game_day.date_time, "F")
    embed.add_field(name="Date & Time", value=when, inline=False)

    location = game_day.location or "No location specified"
    if game_day.host_user_id:
        location = f"{location} (Host: <@{game_day.host_user_id}>)"
    embed.add_field(name="Location", value=location, inline=False)

    for status, label in _TALLY_FIELDS:
        ids = [a.user_id for a in attendances if a.status is status]
        embed.add_field(name=f"{label} ({len(ids)})", value=_mentions(ids), inline=True)

    if event_url:
        embed.add_field(name="Event", value=event_url, inline=False)
    embed.set_footer(text=f"Game Day ID: {game_day.id}")
    return embed


def campaign_embed(campaign: Campaign, players: Sequence[Player] = ()) -> discord.Embed:
    embed = discord.Embed(
        title=campaign.display_name,
        description=campaign.description or "No description provided",
        color=discord.Color.blurple(),
    )
    embed.add_field(name="Regular game time", value=campaign.regular_game_time, inline=False)
    embed.add_field(name="Role", value=f"<@&{campaign.discord_role_id}>", inline=True)
    embed.add_field(
        name=f"Interested ({len(players)})",
        value=_mentions(p.user_id for p in players),
        inline=False,
    )
    embed.set_footer(text=f"Campaign ID: {campaign.id}")
    return embed


def game_embed(game: Game) -> discord.Embed:
    embed = discord.Embed(
        title=game.name,
        description=game.description or "No description provided",
        color=discord.Color.blue(),
    )
    embed.add_field(name="Short name", value=game.short_name, inline=True)
    embed.add_field(name="Players", value=_players_range(game), inline=True)
    if game.discord_role_id:
        embed.add_field(name="Role", value=f"<@&{game.discord_role_id}>", inline=True)
    return embed


def game_list_embed(games: Sequence[Game]) -> discord.Embed:
    embed = discord.Embed(title="Games", color=discord.Color.blue())
    if not games:
        embed.description = "No games have been set up yet. Use `/game setup` to add one."
        return embed
    lines = []
    for game in games:
        role = f" <@&{game.discord_role_id}>" if game.discord_role_id else ""
        lines.append(f"**{game.name}** ({game.short_name}) | {_players_range(game)} players{role}")
    embed.description = "\n".join(lines)[:4096]
    return embed


def game_day_list_embed(game_days: Sequence[GameDay]) -> discord.Embed:
    embed = discord.Embed(title="Upcoming game days", color=discord.Color.gold())
    if not game_days:
        embed.description = "Nothing scheduled. Use `/game_day schedule` to plan one."
        return embed
    lines = [
        f"{discord.utils.format_dt(gd.date_time, 'f')} **{gd.title}** "
        f"[{gd.status.value.lower()}]"
        + (f" <@&{gd.discord_role_id}>" if gd.discord_role_id else "")
        for gd in game_days
    ]
    embed.description = "\n".join(lines)[:4096]
    return embed
