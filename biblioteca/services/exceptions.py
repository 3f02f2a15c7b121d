"""
Error kinds raised by the poll services.

Every failure of a poll/vote operation surfaces as one of these, carrying a
stable ``code``, a human-readable ``message`` and the HTTP status the API
layer renders it with. Only ``Unavailable`` is safe to retry unchanged.
"""


class PollServiceError(Exception):
    code = "POLL_ERROR"
    status = 400
    retryable = False
    default_message = "Poll operation failed"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(PollServiceError):
    code = "VALIDATION_ERROR"
    status = 400
    default_message = "Validation error"


class Forbidden(PollServiceError):
    code = "FORBIDDEN"
    status = 403
    default_message = "Administrator privileges are required"


class NotFound(PollServiceError):
    code = "POLL_NOT_FOUND"
    status = 404
    default_message = "Poll not found"


class PollInactive(PollServiceError):
    code = "POLL_INACTIVE"
    status = 409
    default_message = "This poll is no longer active"


class PollClosed(PollServiceError):
    code = "POLL_CLOSED"
    status = 409
    default_message = "The voting period for this poll has ended"


class InvalidOption(PollServiceError):
    code = "INVALID_OPTION"
    status = 400
    default_message = "The selected option is not valid for this poll"


class DuplicateVote(PollServiceError):
    code = "DUPLICATE_VOTE"
    status = 409
    default_message = "You have already voted in this poll"


class ConstraintViolation(PollServiceError):
    code = "CONSTRAINT_VIOLATION"
    status = 409
    default_message = "The operation conflicts with a concurrent change"


class Unavailable(PollServiceError):
    code = "SERVICE_UNAVAILABLE"
    status = 503
    retryable = True
    default_message = "The poll service is temporarily unavailable, please retry"
