from __future__ import annotations


class NotificationError(Exception):
    """Base for every named failure of a guardian notification attempt.

    `code` is a stable machine-readable id in the project's E_* style,
    `status` is the single line shown to the teacher.
    """
    code = "E_NOTIFY"
    status = "Error occurred while opening WhatsApp"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.code)
        self.detail = detail


class InvalidPhone(NotificationError):
    code = "E_INVALID_PHONE"
    status = "Missing or invalid parent phone number"


class MissingCountryCode(NotificationError):
    code = "E_MISSING_COUNTRY_CODE"
    status = "Country code required. Please add country code (e.g., 20 for Egypt)"


class IncompleteStudent(NotificationError):
    code = "E_INCOMPLETE_STUDENT"
    status = "Student data incomplete - missing name"


class DispatchBlocked(NotificationError):
    code = "E_DISPATCH_BLOCKED"
    status = "Link blocked - please allow the channel to open and try again"


class SyncFailed(NotificationError):
    code = "E_SYNC_FAILED"
    status = "WhatsApp sent but failed to update status"


# Contained inside the scoring coordinator, never terminal
class HistoryLookupFailed(NotificationError):
    code = "E_HISTORY_LOOKUP"
    status = "Could not read scoring history"


class ScoringRequestFailed(NotificationError):
    code = "E_SCORING_REQUEST"
    status = "Score update failed"
