"""Service-layer exceptions.

Services raise these; a single exception handler in main.py renders them
as the ``{"success": false, "message": ...}`` envelope with the class's
status code.  ``message`` is always safe to show the caller.  Failures in
a dependency (gateway, queue) keep the original exception as ``__cause__``
for the server log and surface only a generic message.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ServiceError):
    status_code = 400


class MissingFieldsError(InvalidRequestError):
    pass


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 400


class DuplicateReviewError(ConflictError):
    status_code = 403


class VerificationFailedError(ServiceError):
    status_code = 400


class DependencyFailureError(ServiceError):
    status_code = 500


class EnrollmentFailedError(ServiceError):
    status_code = 500
