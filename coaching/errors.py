"""
coaching/errors.py
Exceptions raised by the Cadence services.

Pages catch these at the call site and turn them into a status message;
none of them should reach Streamlit's error overlay.
"""


class CoachingError(Exception):
    """Base class for every error raised by the coaching package."""


# ─── Validation (raised before any store call) ───────────────────────────────

class ValidationError(CoachingError):
    pass


class NotAuthenticatedError(ValidationError):
    def __init__(self, message: str = "You must be logged in to do that."):
        super().__init__(message)


class EmptyEmailError(ValidationError):
    def __init__(self, message: str = "Please enter an email address."):
        super().__init__(message)


class SelfInviteError(ValidationError):
    def __init__(self, message: str = "You cannot invite yourself."):
        super().__init__(message)


class EmptyMessageError(ValidationError):
    def __init__(self, message: str = "Message cannot be empty."):
        super().__init__(message)


# ─── Business-rule conflicts (non-fatal, no write performed) ─────────────────

class ConflictError(CoachingError):
    pass


class AlreadyTeammateError(ConflictError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"{email} is already your teammate.")


class InvitePendingError(ConflictError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"An invitation to {email} is already pending.")


# ─── Authorisation ───────────────────────────────────────────────────────────

class PermissionDeniedError(CoachingError):
    pass


# ─── Store failures ──────────────────────────────────────────────────────────

class RemoteError(CoachingError):
    """
    The store rejected a query or mutation.

    Carries the StoreError so callers can log the code; the message shown to
    users stays generic.
    """

    def __init__(self, action: str, error=None):
        self.action = action
        self.error = error
        detail = getattr(error, "message", None) or "Unknown error"
        super().__init__(f"Failed to {action}: {detail}")


class ScoresNotUpdatedError(RemoteError):
    """The message was stored but the profile averages could not be refreshed."""

    def __init__(self, saved, error=None):
        self.saved = saved
        super().__init__("update profile scores", error)


def raise_for_error(response, action: str):
    """Raise RemoteError if the store response carries an error, else return it."""
    if response.error is not None:
        raise RemoteError(action, response.error)
    return response
