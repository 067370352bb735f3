"""
Search API - Keyword search across accounts and content.
"""

from typing import List, Union
from urllib.parse import urlencode

from ._http import HTTPClient
from ..exceptions import RequiredVariableError
from ..models import Account, AccountType, Content, ContentType, hydrate_account, hydrate_content

SearchType = Union[ContentType, AccountType]


class SearchAPI:
    """API for search."""

    def __init__(self, http: HTTPClient):
        """
        Initialize Search API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def search(self, query: str, type: SearchType) -> List[Union[Content, Account]]:
        """
        Search by keyword.

        Args:
            query: A keyword
            type: Kind of result to hydrate

        Returns:
            Matching items as models of ``type``

        Raises:
            RequiredVariableError: If query or type is missing
        """
        if not query:
            raise RequiredVariableError("query")
        if type is None:
            raise RequiredVariableError("type")

        data = self._http.request(f"search?{urlencode({'query': query})}")
        if not data:
            return []
        if isinstance(data, dict):
            data = data.get("data") or []

        if isinstance(type, AccountType):
            return [hydrate_account(type, item) for item in data]
        return [hydrate_content(type, item) for item in data]
