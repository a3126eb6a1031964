class SessionNotFoundError(Exception):
    """Raised when no chat session exists for the given UUID."""

    pass


class SessionBusyError(Exception):
    """Raised when a message is sent while the previous turn of the same session is still in flight."""

    pass


class EmptyMessageError(Exception):
    """Raised when a user message has no content after trimming whitespace."""

    pass


class ConfirmationRequiredError(Exception):
    """Raised when a destructive session action is requested without explicit confirmation."""

    pass
