"""
Makuwro API Client - Main facade for all API operations.

This module provides flat access to every endpoint while organizing the
functionality into domain-specific modules.
"""

from dataclasses import replace
from typing import Optional, Dict, Any, List, Union

from ..config import MakuwroConfig
from ..models import (
    Account,
    AccountType,
    Art,
    BlogPost,
    Character,
    Comment,
    Content,
    ContentType,
    Notification,
    Story,
    User,
)
from ._http import HTTPClient
from .accounts import AccountsAPI
from .contents import ContentsAPI
from .gateway import Gateway
from .search import SearchAPI, SearchType


class MakuwroClient:
    """
    Client for interacting with the Makuwro API.

    This is a facade that provides both:
    - Domain-specific sub-clients (client.accounts, client.contents, etc.)
    - Flat methods (client.get_user(), client.create_art(), etc.)

    Usage:
        with MakuwroClient(token="...") as client:
            me = client.get_user()
            art = client.create_art(me.username, "sunset", {"title": "Sunset"})
            art.delete(client)
    """

    def __init__(
        self,
        config: Optional[MakuwroConfig] = None,
        *,
        token: Optional[str] = None,
        environment: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the API client.

        Args:
            config: Optional configuration. Production defaults if not provided.
            token: Session token (overrides config)
            environment: "production" or "development" (overrides config)
            timeout: Request timeout in seconds (overrides config)
        """
        overrides = {
            key: value
            for key, value in (("token", token), ("environment", environment), ("timeout", timeout))
            if value is not None
        }
        # The client owns a copy; token changes never leak back to the caller
        config = replace(config or MakuwroConfig(), **overrides)
        config.validate()

        self._http = HTTPClient(config)

        # Domain-specific API modules
        self.accounts = AccountsAPI(self._http)
        self.contents = ContentsAPI(self._http)
        self.search_api = SearchAPI(self._http)
        self.gateway = Gateway(config)

    @property
    def config(self) -> MakuwroConfig:
        """Get the configuration."""
        return self._http.config

    @property
    def http(self) -> HTTPClient:
        return self._http

    @property
    def token(self) -> Optional[str]:
        return self._http.token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._http.token = value

    @property
    def user(self) -> Optional[User]:
        """The cached authenticated user, if it has been fetched."""
        return self.accounts.cached_user

    # ========== Gateway ==========

    def connect(self) -> None:
        """Open the gateway connection and verify the token if one is held."""
        self.gateway.connect()
        if self.token:
            self.get_authenticated_user()

    def disconnect(self) -> None:
        """Close the gateway connection."""
        self.gateway.close()

    # ========== Generic request ==========

    def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        force_body_parse: bool = False
    ) -> Any:
        """Send one request through the HTTP client."""
        return self._http.request(path, method, headers, body, force_body_parse)

    # ========== Accounts ==========

    def get_user(self, username: Optional[str] = None, id: Optional[str] = None) -> User:
        """Get a user; the authenticated user when no identifier is given."""
        return self.accounts.get_user(username=username, id=id)

    def get_authenticated_user(self) -> User:
        """Get the user that owns the current token."""
        return self.accounts.get_authenticated_user()

    def create_user(self, username: str, password: str, birth_date: Any, email: str) -> User:
        """Create a new user account."""
        return self.accounts.create_user(username, password, birth_date, email)

    def create_session(self, username: str, password: str) -> str:
        """Log in and keep the returned token."""
        return self.accounts.create_session(username, password)

    def delete_session_token(self, token: Optional[str] = None) -> None:
        """Revoke a token (the client's own by default)."""
        self.accounts.delete_session_token(token)

    def update_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        props: Optional[Dict[str, Any]] = None
    ) -> Account:
        """Update an account."""
        return self.accounts.update_account(account_type, username, props)

    def delete_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> None:
        """Delete an account."""
        self.accounts.delete_account(account_type, username, password)

    def disable_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> None:
        """Disable an account."""
        self.accounts.disable_account(account_type, username, password)

    # ========== Generic content ==========

    def create_content(
        self,
        content_type: ContentType,
        username: str,
        slug: Optional[str] = None,
        props: Optional[Dict[str, Any]] = None,
        is_thread: bool = False
    ) -> Content:
        """Create content of any kind."""
        return self.contents.create(content_type, username, slug, props, is_thread)

    def get_content(self, content_type: ContentType, username: str, slug: str) -> Content:
        """Get one content item."""
        return self.contents.get(content_type, username, slug)

    def get_all_content(self, content_type: ContentType, username: str) -> List[Content]:
        """Get all content of a kind posted by an owner."""
        return self.contents.get_all(content_type, username)

    def update_content(
        self,
        content_type: ContentType,
        username: str,
        slug: str,
        props: Optional[Dict[str, Any]] = None
    ) -> Content:
        """Update one content item."""
        return self.contents.update(content_type, username, slug, props)

    def delete_content(self, content_type: ContentType, username: str, slug: str) -> None:
        """Delete one content item."""
        self.contents.delete(content_type, username, slug)

    def upload_image(
        self,
        content_type: ContentType,
        username: str,
        slug: str,
        image: bytes
    ) -> Optional[str]:
        """Validate and upload an image for a content item."""
        return self.contents.upload_image(content_type, username, slug, image)

    def search(self, query: str, type: SearchType) -> List[Union[Content, Account]]:
        """Search by keyword."""
        return self.search_api.search(query, type)

    # ========== Convenience wrappers ==========

    def _owner(self, username: Optional[str]) -> str:
        """Default an owner to the authenticated user's username."""
        if username:
            return username
        return self.get_authenticated_user().username

    def create_art(self, username: Optional[str] = None, slug: Optional[str] = None,
                   props: Optional[Dict[str, Any]] = None) -> Art:
        return self.create_content(ContentType.ART, self._owner(username), slug, props)

    def create_blog_post(self, username: Optional[str] = None, slug: Optional[str] = None,
                         props: Optional[Dict[str, Any]] = None) -> BlogPost:
        return self.create_content(ContentType.BLOG_POST, self._owner(username), slug, props)

    def create_character(self, username: Optional[str] = None, slug: Optional[str] = None,
                         props: Optional[Dict[str, Any]] = None) -> Character:
        return self.create_content(ContentType.CHARACTER, self._owner(username), slug, props)

    def create_story(self, username: Optional[str] = None, slug: Optional[str] = None,
                     props: Optional[Dict[str, Any]] = None) -> Story:
        return self.create_content(ContentType.STORY, self._owner(username), slug, props)

    def create_comment(self, content_type: ContentType, username: str, slug: str,
                       props: Dict[str, Any]) -> Comment:
        """Post a threaded comment on a content item."""
        return self.create_content(content_type, username, slug, props, is_thread=True)

    def get_art(self, username: str, slug: str) -> Art:
        return self.get_content(ContentType.ART, username, slug)

    def get_blog_post(self, username: str, slug: str) -> BlogPost:
        return self.get_content(ContentType.BLOG_POST, username, slug)

    def get_character(self, username: str, slug: str) -> Character:
        return self.get_content(ContentType.CHARACTER, username, slug)

    def get_story(self, username: str, slug: str) -> Story:
        return self.get_content(ContentType.STORY, username, slug)

    def get_all_art(self, username: Optional[str] = None) -> List[Art]:
        return self.get_all_content(ContentType.ART, self._owner(username))

    def get_all_blog_posts(self, username: Optional[str] = None) -> List[BlogPost]:
        return self.get_all_content(ContentType.BLOG_POST, self._owner(username))

    def get_all_characters(self, username: Optional[str] = None) -> List[Character]:
        return self.get_all_content(ContentType.CHARACTER, self._owner(username))

    def get_all_stories(self, username: Optional[str] = None) -> List[Story]:
        return self.get_all_content(ContentType.STORY, self._owner(username))

    def get_notifications(self, username: Optional[str] = None) -> List[Notification]:
        return self.get_all_content(ContentType.NOTIFICATION, self._owner(username))

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the gateway connection and HTTP session."""
        self.gateway.close()
        self._http.close()

    def __enter__(self) -> "MakuwroClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# Convenience function for quick API access
def get_client(config: Optional[MakuwroConfig] = None) -> MakuwroClient:
    """
    Get an API client instance.

    Args:
        config: Optional configuration

    Returns:
        MakuwroClient instance
    """
    return MakuwroClient(config)
