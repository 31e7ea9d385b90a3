"""
Domain exceptions mapped to HTTP status codes by the handlers in main.py
"""
from typing import Any, Dict, Optional
from fastapi import status


class BaseCustomException(Exception):
    """Base for errors that reach the client as the standard error envelope"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseCustomException):
    """Submitted data is missing, malformed or not unique"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: str = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, details)


class ResourceNotFoundError(BaseCustomException):
    """A requested resource is not found.

    Also used for resources that exist but belong to someone else, so
    that non-owners cannot probe for their existence.
    """

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, resource: str = None, identifier: str = None):
        details = {}
        if resource:
            details["resource"] = resource
        if identifier:
            details["identifier"] = identifier
        super().__init__(message, details)


class ConflictError(BaseCustomException):
    """The request contradicts the current state of a resource"""

    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(BaseCustomException):
    """No usable identity accompanies the request"""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(AuthenticationError):
    """Bearer token failed signature or expiry verification"""


class InvalidRoleError(AuthenticationError):
    """Verified token carries an unrecognised role"""


class AuthorizationError(BaseCustomException):
    """The authenticated account may not perform the action"""

    status_code = status.HTTP_403_FORBIDDEN


class InternalError(BaseCustomException):
    """Unexpected store or runtime failure"""
