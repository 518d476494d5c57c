"""Status values stored in the database."""

from enum import Enum


class AttendanceStatus(str, Enum):
    """A member's RSVP for a game day."""

    AVAILABLE = "AVAILABLE"
    INTERESTED = "INTERESTED"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class GameDayStatus(str, Enum):
    """Game day lifecycle. SCHEDULING is the only state that takes RSVPs."""

    SCHEDULING = "SCHEDULING"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class PlayerStatus(str, Enum):
    """A member's standing in a campaign."""

    INTERESTED = "INTERESTED"
    CONFIRMED = "CONFIRMED"
