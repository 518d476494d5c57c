"""User-facing reply texts."""

from shared.models.enums import AttendanceStatus, PlayerStatus

NOT_SET_UP = "This server is not set up yet. An admin needs to run `/setup` first."
GUILD_ONLY = "This only works inside a server."
STORAGE_ERROR = "Could not save that right now. Please try again later."
USER_ERROR = "Failed to retrieve or create your user record. Please try again later."
ROLE_SYNC_CAVEAT = (
    "Status saved, but role assignment failed. "
    "Ask a moderator to check the bot's role permissions."
)
FORM_EXPIRED = "This form has expired. Please run the command again."
GAME_DAY_NOT_FOUND = "Game day not found. It may have been deleted."
CAMPAIGN_NOT_FOUND = "Campaign not found. It may have been deleted."
GAME_DAY_CLOSED = "This game day is no longer taking RSVPs."


def attendance_status_message(status: AttendanceStatus, title: str) -> str:
    if status is AttendanceStatus.AVAILABLE:
        return f'You are marked as available for "{title}".'
    if status is AttendanceStatus.INTERESTED:
        return f'You are marked as interested in "{title}".'
    return f'You are marked as not available for "{title}".'


def campaign_interest_message(status: PlayerStatus, title: str) -> str:
    if status is PlayerStatus.CONFIRMED:
        return f'You are confirmed for the "{title}" campaign.'
    return f'You are now interested in the "{title}" campaign!'
