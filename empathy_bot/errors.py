"""Exception hierarchy shared by the session core and the HTTP layer."""


class EmpathyBotError(Exception):
    """Base class for all errors raised by empathy_bot."""

    status_code = 500


class InputError(EmpathyBotError):
    """A required field is missing or invalid."""

    status_code = 400


class SessionBusyError(InputError):
    """A turn or analysis is already outstanding for this session."""


class InsufficientTranscriptError(EmpathyBotError):
    """The transcript has no trainee turns to analyze."""

    status_code = 422

    def __init__(self, message: str = "insufficient data"):
        super().__init__(message)


class UpstreamError(EmpathyBotError):
    """A hosted backend was unavailable or returned malformed data."""

    status_code = 502


class AnalysisFailedError(EmpathyBotError):
    """The analysis step produced no parsable result."""

    def __init__(self, message: str = "Failed to generate analysis"):
        super().__init__(message)
