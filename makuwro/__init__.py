"""
Makuwro - Python SDK for the Makuwro content-publishing service.

Provides a REST client returning typed account and content models, a typed
error taxonomy, and the ``makuwro`` command-line tool.
"""

__version__ = "1.0.0"
__prog_name__ = "makuwro"

from .config import Endpoints, ENDPOINTS, MakuwroConfig, ConfigManager, get_config_manager
from .exceptions import (
    MakuwroError,
    ConfigurationError,
    MakuwroConnectionError,
    RequiredVariableError,
    UnallowedFileTypeError,
    RequestTimeoutError,
    APIError,
    UnknownError,
    BadCredentialsError,
    UnauthenticatedError,
    InvalidTokenError,
    AccountBlockedError,
    AccountConflictError,
    AccountNotFoundError,
    UnderageError,
    UsernameFormatError,
    ContentConflictError,
    ERROR_CODES,
    raise_from_code,
)
from .models import (
    AccountType,
    ContentType,
    Account,
    User,
    Team,
    Content,
    Art,
    BlogPost,
    Character,
    Story,
    Comment,
    Notification,
    hydrate_owner,
    hydrate_content,
    hydrate_account,
)
from .api import MakuwroClient, get_client

__all__ = [
    "__version__",
    # Client
    "MakuwroClient",
    "get_client",
    # Configuration
    "Endpoints",
    "ENDPOINTS",
    "MakuwroConfig",
    "ConfigManager",
    "get_config_manager",
    # Models
    "AccountType",
    "ContentType",
    "Account",
    "User",
    "Team",
    "Content",
    "Art",
    "BlogPost",
    "Character",
    "Story",
    "Comment",
    "Notification",
    "hydrate_owner",
    "hydrate_content",
    "hydrate_account",
    # Errors
    "MakuwroError",
    "ConfigurationError",
    "MakuwroConnectionError",
    "RequiredVariableError",
    "UnallowedFileTypeError",
    "RequestTimeoutError",
    "APIError",
    "UnknownError",
    "BadCredentialsError",
    "UnauthenticatedError",
    "InvalidTokenError",
    "AccountBlockedError",
    "AccountConflictError",
    "AccountNotFoundError",
    "UnderageError",
    "UsernameFormatError",
    "ContentConflictError",
    "ERROR_CODES",
    "raise_from_code",
]
