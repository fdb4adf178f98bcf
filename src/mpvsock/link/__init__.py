"""Links to a running or spawned mpv process."""

from .link import FIRST_REQUEST_ID, MAX_REQUEST_ID, MpvLink
from .transport import DEFAULT_PLAYER, Transport, TransportState

__all__ = [
    "MpvLink",
    "Transport",
    "TransportState",
    "DEFAULT_PLAYER",
    "FIRST_REQUEST_ID",
    "MAX_REQUEST_ID",
]
