"""
Custom exceptions for the Makuwro SDK.

Every failure the server reports carries a numeric ``code``; ``ERROR_CODES``
maps each known code to one exception class and ``raise_from_code`` turns a
decoded error body into the matching exception.
"""

import logging
from typing import Optional, Dict, Any, Type, NoReturn

logger = logging.getLogger(__name__)


class MakuwroError(Exception):
    """Base exception for Makuwro SDK errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(MakuwroError):
    """Configuration-related errors."""
    pass


class MakuwroConnectionError(MakuwroError):
    """The server or gateway could not be reached."""
    pass


class RequiredVariableError(MakuwroError):
    """A mandatory argument was not provided."""

    def __init__(self, variable: str):
        super().__init__(f"No {variable} provided")
        self.variable = variable


class UnallowedFileTypeError(MakuwroError):
    """The file could not be decoded as an allowed type."""
    pass


class RequestTimeoutError(MakuwroError):
    """The request did not complete within the configured timeout."""
    pass


class APIError(MakuwroError):
    """Error reported by the Makuwro API."""

    code: int = 0
    default_message: str = "An unknown error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message or self.default_message)
        if code is not None:
            self.code = code
        self.status_code = status_code
        self.response_data = response_data or {}


class UnknownError(APIError):
    """Fallback for codes the SDK does not recognize."""
    pass


class BadCredentialsError(APIError):
    code = 10000
    default_message = "The username and password combination is incorrect."


class UnauthenticatedError(APIError):
    code = 10001
    default_message = "A valid token is required for this action."


InvalidTokenError = UnauthenticatedError


class AccountBlockedError(APIError):
    code = 10003
    default_message = "The account is blocked from performing this action."


class AccountConflictError(APIError):
    code = 10004
    default_message = "An account with that username already exists."


class AccountNotFoundError(APIError):
    code = 10005
    default_message = "The account does not exist."


class UnderageError(APIError):
    code = 10012
    default_message = "The account owner does not meet the age requirement."


class UsernameFormatError(APIError):
    code = 10013
    default_message = "The username does not meet the format requirements."


class ContentConflictError(APIError):
    code = 20000
    default_message = "Content with that slug already exists."


ERROR_CODES: Dict[int, Type[APIError]] = {
    cls.code: cls
    for cls in (
        BadCredentialsError,
        UnauthenticatedError,
        AccountBlockedError,
        AccountConflictError,
        AccountNotFoundError,
        UnderageError,
        UsernameFormatError,
        ContentConflictError,
    )
}


def raise_from_code(
    data: Optional[Dict[str, Any]],
    status_code: Optional[int] = None
) -> NoReturn:
    """
    Raise the exception bound to the ``code`` of a decoded error body.

    Args:
        data: Decoded error body, expected to hold ``code`` and ``message``
        status_code: HTTP status of the response, if any

    Raises:
        APIError: Always; ``UnknownError`` when the code is missing or unknown
    """
    data = data if isinstance(data, dict) else {}
    code = data.get("code")

    try:
        code = int(code) if code is not None else 0
    except (TypeError, ValueError):
        code = 0

    error_cls: Type[APIError] = ERROR_CODES.get(code, UnknownError)
    logger.warning("API error code=%d status=%s (%s)", code, status_code, error_cls.__name__)

    raise error_cls(
        data.get("message"),
        code=code,
        status_code=status_code,
        response_data=data
    )
