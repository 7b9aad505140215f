# sitesync/services/errors.py
"""
Named outcomes of the logbook operations.
Every error is recoverable by the caller; the HTTP layer renders them as
{"detail": <message>, "error": <kind>} with the status code below.
"""


class LogbookError(Exception):
    """Base class — `kind` is the stable error name exposed to API clients."""

    kind = "LogbookError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(LogbookError):
    kind = "InvalidInput"
    status_code = 400


class NoOrganizationSelected(LogbookError):
    kind = "NoOrganizationSelected"
    status_code = 400

    def __init__(self, message: str = "No organization selected"):
        super().__init__(message)


class SiteNotFound(LogbookError):
    kind = "SiteNotFound"
    status_code = 404


class EntryNotFound(LogbookError):
    kind = "EntryNotFound"
    status_code = 404


class OrganizationNotFound(LogbookError):
    kind = "OrganizationNotFound"
    status_code = 404


class MemberNotFound(LogbookError):
    kind = "MemberNotFound"
    status_code = 404


class PermissionDenied(LogbookError):
    kind = "PermissionDenied"
    status_code = 403


class AlreadyCheckedOut(LogbookError):
    kind = "AlreadyCheckedOut"
    status_code = 409


class DuplicateQrCode(LogbookError):
    kind = "DuplicateQrCode"
    status_code = 409
