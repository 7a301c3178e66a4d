"""Custom exception hierarchy for better error handling."""
from fastapi import HTTPException, status


class DigitalDGPException(Exception):
    """Base exception for all application errors."""
    pass


class SessionNotFoundException(DigitalDGPException):
    """Raised when a practice session is not found."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {self.session_id} not found"
        )


class LLMProviderException(DigitalDGPException):
    """Raised when a provider-backed resource cannot be produced."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"LLM provider unavailable: {detail}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=self.detail
        )


class SubmissionInProgressException(DigitalDGPException):
    """Raised when a stage is submitted while another submission is pending."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} already has a submission in progress")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(self)
        )
