"""Game day feature constants."""

# How long the cancel confirmation buttons stay usable
CANCEL_CONFIRM_TIMEOUT = 60

UPCOMING_LIST_LIMIT = 15
