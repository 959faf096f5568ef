"""
Error taxonomy shared by every component.

Each exception carries the HTTP status it maps to and a short public
message. The detailed cause stays in ``str(exc)`` and is only logged.
"""


class HireFlowError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    default_public_message: str = "Internal server error"

    def __init__(self, message: str = "", public_message: str | None = None) -> None:
        super().__init__(message or public_message or self.default_public_message)
        self._public_message = public_message

    @property
    def public_message(self) -> str:
        """Message that is safe to return to API callers."""
        return self._public_message or self.default_public_message


class ValidationError(HireFlowError):
    """A required input is missing or malformed."""

    status_code = 400
    default_public_message = "Invalid request"

    @property
    def public_message(self) -> str:
        return self._public_message or str(self)


class EmptyDocumentError(ValidationError):
    """The uploaded document yielded too little text to be useful."""

    default_public_message = "Resume text is too short or empty"


class AuthError(HireFlowError):
    """Missing, invalid or expired bearer token."""

    status_code = 401
    default_public_message = "Unauthorized"

    @property
    def public_message(self) -> str:
        return self._public_message or str(self)


class NotFoundError(HireFlowError):
    """The requested record does not exist."""

    status_code = 404
    default_public_message = "Not found"

    @property
    def public_message(self) -> str:
        return self._public_message or str(self)


class CollaboratorError(HireFlowError):
    """An external service or library failed."""

    status_code = 500
    default_public_message = "Upstream service failed"


class ExtractionError(CollaboratorError):
    """Text could not be extracted from the uploaded document."""

    default_public_message = "Failed to process resume"


class GenerationError(CollaboratorError):
    """The LLM call failed, timed out or returned nothing."""

    default_public_message = "AI generation failed"


class MalformedEvaluationError(CollaboratorError):
    """The LLM evaluation was not JSON of the expected shape."""

    default_public_message = "Failed to generate report"


class PersistenceError(CollaboratorError):
    """The interview store could not complete a read or write."""

    default_public_message = "Database operation failed"


class ReportError(CollaboratorError):
    """PDF report rendering failed."""

    default_public_message = "Failed to export PDF"


class AuthServiceError(CollaboratorError):
    """The identity provider could not be reached or is not configured."""

    default_public_message = "Authentication failed"
