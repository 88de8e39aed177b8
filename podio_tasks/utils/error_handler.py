"""
Error taxonomy and error handling utilities

Every operation either returns its documented result or raises exactly one
of the TaskAPIError subclasses below.
"""

from typing import Any, Optional
from podio_tasks.models.response import ErrorResponse
from podio_tasks.utils.logger import logger


class TaskAPIError(Exception):
    """Base exception for task API errors"""
    
    error_code = "task_api_error"
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class InvalidReference(TaskAPIError):
    """Reference has an unknown type or a non-positive id"""
    error_code = "invalid_reference"


class ValidationFailed(TaskAPIError):
    """Malformed create/update payload, detected before any remote call"""
    error_code = "validation_failed"


class NotFound(TaskAPIError):
    """Unknown task id (or other unknown remote object)"""
    error_code = "not_found"


class Unauthorized(TaskAPIError):
    """Missing, expired or rejected credentials"""
    error_code = "unauthorized"


class RemoteRejected(TaskAPIError):
    """Service refused an otherwise well-formed request"""
    error_code = "remote_rejected"


class RemoteUnavailable(TaskAPIError):
    """Transport failure, timeout or server-side error"""
    error_code = "remote_unavailable"


def error_from_status(status_code: int, body: Any = None) -> TaskAPIError:
    """
    Map an HTTP error status to the error taxonomy
    
    Args:
        status_code: HTTP status code (>= 400)
        body: Decoded error body, if any
        
    Returns:
        Matching TaskAPIError instance (not raised)
    """
    details = body if isinstance(body, dict) else None
    message = f"HTTP {status_code}"
    if details:
        description = details.get("error_description") or details.get("error")
        if description:
            message = f"{message}: {description}"
    elif body:
        message = f"{message}: {str(body)[:200]}"
    
    if status_code == 401:
        return Unauthorized(message, details=details)
    if status_code in (404, 410):
        return NotFound(message, details=details)
    if status_code in (408, 429) or status_code >= 500:
        return RemoteUnavailable(message, details=details)
    return RemoteRejected(message, details=details)


def handle_error(error: Exception) -> ErrorResponse:
    """
    Handle error and return user-friendly message
    
    Args:
        error: Exception to handle
        
    Returns:
        ErrorResponse with user-friendly message
    """
    if isinstance(error, TaskAPIError):
        logger.error(f"{type(error).__name__}: {error.message}")
    else:
        logger.error(f"Error occurred: {error}", exc_info=True)
    
    if isinstance(error, (InvalidReference, ValidationFailed)):
        return ErrorResponse(
            message=f"Invalid input: {error.message}",
            error_code=error.error_code,
        )
    
    if isinstance(error, NotFound):
        return ErrorResponse(
            message=f"Not found: {error.message}",
            error_code=error.error_code,
            details=error.details,
        )
    
    if isinstance(error, Unauthorized):
        return ErrorResponse(
            message="Not authorized. Check PODIO_ACCESS_TOKEN.",
            error_code=error.error_code,
            details=error.details,
        )
    
    if isinstance(error, RemoteRejected):
        return ErrorResponse(
            message=f"Request rejected by Podio: {error.message}",
            error_code=error.error_code,
            details=error.details,
        )
    
    if isinstance(error, RemoteUnavailable):
        return ErrorResponse(
            message=f"Podio is unavailable: {error.message}",
            error_code=error.error_code,
        )
    
    # Generic error message
    return ErrorResponse(
        message="An unexpected error occurred.",
    )


def format_error_message(error: Exception) -> str:
    """
    Format error message for user
    
    Args:
        error: Exception to format
        
    Returns:
        User-friendly error message
    """
    error_response = handle_error(error)
    return error_response.message
