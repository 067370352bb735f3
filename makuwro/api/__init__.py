"""
Makuwro API Client Package.

This package provides a modular client for the Makuwro REST API.

Structure:
    - client.py: Main MakuwroClient facade
    - _http.py: Base HTTP client with session, token, and error handling
    - accounts.py: Users, sessions and account mutation
    - contents.py: Generic content CRUD and image uploads
    - search.py: Keyword search
    - gateway.py: Realtime gateway connection

Usage:
    from makuwro.api import MakuwroClient

    client = MakuwroClient(token="...")

    # Domain-specific
    me = client.accounts.get_user()

    # Flat methods
    stories = client.get_all_stories("alice")
"""

from .client import MakuwroClient, get_client
from ._http import HTTPClient, encode_form
from .accounts import AccountsAPI
from .contents import ContentsAPI, validate_image
from .search import SearchAPI
from .gateway import Gateway

__all__ = [
    # Main client
    "MakuwroClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    "encode_form",
    # Domain APIs
    "AccountsAPI",
    "ContentsAPI",
    "SearchAPI",
    "Gateway",
    "validate_image",
]
