from enum import Enum

ATTENDANCE = "attendance"
HOMEWORK = "homework"

class DispatchResult(str, Enum):
    """What the local side can observe after handing a link to the channel."""
    HANDED_OFF = "handed_off"
    LOCALLY_BLOCKED = "locally_blocked"

SUCCESS_STATUS = "WhatsApp opened successfully!"
