# /app/core/exceptions.py

"""
The domain error taxonomy shared by every service.

Services raise these; the HTTP layer maps them to status codes in one place
(see `app.main`). `DuplicateConflictError` is the only kind that some
repositories recover from locally (re-enrollment, repeated session join).
"""


class DomainError(Exception):
    """Base class for every business-rule failure raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """The requested entity is absent or not visible to the caller."""


class PermissionDeniedError(DomainError):
    """The caller's role is not allowed to perform the action."""


class ValidationError(DomainError):
    """A caller-supplied value violates a stated constraint."""


class InvalidGradeError(ValidationError):
    pass


class DuplicateConflictError(DomainError):
    """A uniqueness constraint was hit by a repeated action."""


class DuplicateSubmissionError(DuplicateConflictError):
    pass


class WindowClosedError(DomainError):
    """A time-bounded action was attempted outside its valid window."""


class ExamNotActiveError(WindowClosedError):
    pass


class SubmissionWindowClosedError(WindowClosedError):
    pass


class UpstreamFailureError(DomainError):
    """The data store failed in a way not covered by the other kinds."""
