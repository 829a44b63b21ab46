"""
Domain exceptions for the intake and review workflows.

Client-visible errors carry the HTTP status the API layer should answer with.
Enrichment and notification failures are internal: they are returned inside an
``Outcome`` and logged, and only reach a caller for operations whose whole
purpose is the failed step (interview processing, custom email).
"""

from fastapi import status


class ATSError(Exception):
    """Base class for all workflow errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or self.error_code)
        self.message = message or self.__class__.__doc__ or self.error_code


class NotFound(ATSError):
    """Resource not found."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class InvalidInput(ATSError):
    """Invalid input provided."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_INPUT"


class InvalidStatus(InvalidInput):
    """Invalid status."""

    error_code = "INVALID_STATUS"


class DuplicateApplication(ATSError):
    """You have already applied for this position."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "DUPLICATE_APPLICATION"


class JobNotAcceptingApplications(ATSError):
    """This job is not accepting applications."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "JOB_NOT_ACCEPTING_APPLICATIONS"


class MissingDocument(ATSError):
    """A document upload is required."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "MISSING_DOCUMENT"


class StorageFailure(ATSError):
    """Failed to store the uploaded document."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "STORAGE_FAILURE"


class EnrichmentFailure(ATSError):
    """Base for failures of best-effort external steps."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_FAILURE"


class ExtractionFailure(EnrichmentFailure):
    """Failed to extract text from the document."""

    error_code = "EXTRACTION_FAILURE"


class ScoringFailure(EnrichmentFailure):
    """Failed to analyze the document."""

    error_code = "SCORING_FAILURE"


class TranscriptionFailure(EnrichmentFailure):
    """Failed to transcribe the recording."""

    error_code = "TRANSCRIPTION_FAILURE"


class NotificationFailure(EnrichmentFailure):
    """Failed to send the notification."""

    error_code = "NOTIFICATION_FAILURE"
