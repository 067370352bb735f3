"""
Accounts API - Users, sessions and account mutation.
"""

import logging
from typing import Optional, Dict, Any
from urllib.parse import urlencode, quote

from ._http import HTTPClient, encode_form, expect_object
from ..exceptions import RequiredVariableError, UnauthenticatedError, UnknownError
from ..models import Account, AccountType, User, hydrate_account

logger = logging.getLogger(__name__)


class AccountsAPI:
    """
    API for account and session operations.

    Handles:
    - User lookup with a cached authenticated user
    - Account creation
    - Session tokens
    - Account update, disable and delete
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Accounts API.

        Args:
            http: HTTP client instance
        """
        self._http = http
        self.cached_user: Optional[User] = None

    # ========== Self detection ==========

    def is_self(self, username: Optional[str] = None, id: Optional[str] = None) -> bool:
        """
        Check whether an identifier refers to the authenticated user.

        No identifier means self. Otherwise the identifier is compared against
        the cached user only; an empty cache never matches.
        """
        if not username and not id:
            return True

        user = self.cached_user
        if user is None:
            return False

        if username:
            return user.is_same_account(username)
        return id == user.id

    @staticmethod
    def account_path(account_type: AccountType, username: Optional[str] = None) -> str:
        """
        Build the path of an account.

        Self operations use the singular directory; operations on another
        account use the plural directory followed by the username.
        """
        if username:
            return f"accounts/{account_type.directory}s/{quote(username)}"
        return f"accounts/{account_type.directory}"

    def _target_username(self, account_type: AccountType, username: Optional[str]) -> Optional[str]:
        """Drop the username when it names the authenticated user."""
        if account_type is AccountType.USER and self.is_self(username):
            return None
        if not username:
            raise RequiredVariableError("username")
        return username

    # ========== Users ==========

    def get_user(self, username: Optional[str] = None, id: Optional[str] = None) -> User:
        """
        Get a user by username or ID.

        With no identifier the authenticated user is returned. When both are
        given, the username is used.

        Args:
            username: The user's username
            id: The user's unique ID

        Returns:
            The requested User

        Raises:
            UnauthenticatedError: Self lookup without a cached user or token
            AccountNotFoundError: If no user matches
        """
        self_lookup = self.is_self(username, id)

        if self_lookup:
            if self.cached_user is not None:
                return self.cached_user
            if not self._http.token:
                raise UnauthenticatedError("No token provided")
            path = "accounts/user"
        elif username:
            path = f"accounts/users/{quote(username)}"
        else:
            path = f"accounts/users?{urlencode({'id': id})}"

        data = self._http.request(path)
        user = User.from_dict(expect_object(data, "a user"))

        if self_lookup:
            self.cached_user = user

        return user

    def get_authenticated_user(self) -> User:
        """Get the user that owns the current token."""
        return self.get_user()

    def create_user(
        self,
        username: str,
        password: str,
        birth_date: Any,
        email: str
    ) -> User:
        """
        Create a new user account.

        Args:
            username: Username of the account
            password: Password of the account
            birth_date: Birth date of the account owner (epoch milliseconds)
            email: Email address of the account owner

        Returns:
            The created User
        """
        fields = {
            "username": username,
            "password": password,
            "birthDate": birth_date,
            "email": email,
        }
        for name, value in fields.items():
            if value is None or value == "":
                raise RequiredVariableError(name)

        data = self._http.request(
            "accounts/user",
            method="POST",
            body=encode_form(fields),
            force_body_parse=True
        )
        return User.from_dict(expect_object(data, "the created user"))

    # ========== Sessions ==========

    def create_session(self, username: str, password: str) -> str:
        """
        Request a new session token and keep it on the client.

        Args:
            username: Username of the account
            password: Password of the account

        Returns:
            The token string

        Raises:
            BadCredentialsError: If the username-password combination is wrong
        """
        if not username:
            raise RequiredVariableError("username")
        if not password:
            raise RequiredVariableError("password")

        data = self._http.request(
            "accounts/user/sessions",
            method="POST",
            headers={"username": username, "password": password},
            force_body_parse=True
        )

        token = data.get("token") if isinstance(data, dict) else data
        if not token or not isinstance(token, str):
            raise UnknownError("Session created but no token in the response body")

        self._http.token = token
        logger.info("Session created for %s", username)
        return token

    def delete_session_token(self, token: Optional[str] = None) -> None:
        """
        Revoke a session token.

        Args:
            token: Token to revoke; defaults to the client's own token
        """
        target = token or self._http.token
        if not target:
            raise RequiredVariableError("token")

        self._http.request(
            "accounts/user/sessions",
            method="DELETE",
            headers={"token": target}
        )

        if target == self._http.token:
            self._http.token = None

    # ========== Account mutation ==========

    def update_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        props: Optional[Dict[str, Any]] = None
    ) -> Account:
        """
        Update an account.

        Args:
            account_type: Kind of account
            username: Target account; omit for the authenticated user
            props: Fields to change

        Returns:
            The updated account
        """
        target = self._target_username(account_type, username)
        data = self._http.request(
            self.account_path(account_type, target),
            method="PATCH",
            body=encode_form(props),
            force_body_parse=True
        )
        account = hydrate_account(account_type, expect_object(data, "the updated account"))

        if target is None and isinstance(account, User):
            self.cached_user = account

        return account

    def delete_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> None:
        """Delete an account; omit username for the authenticated user."""
        target = self._target_username(account_type, username)
        props = {"password": password} if password is not None else None
        self._http.request(
            self.account_path(account_type, target),
            method="DELETE",
            body=encode_form(props)
        )

    def disable_account(
        self,
        account_type: AccountType,
        username: Optional[str] = None,
        password: Optional[str] = None
    ) -> None:
        """Disable an account; omit username for the authenticated user."""
        target = self._target_username(account_type, username)
        props: Dict[str, Any] = {"isDisabled": True}
        if password is not None:
            props["password"] = password
        self._http.request(
            self.account_path(account_type, target),
            method="PATCH",
            body=encode_form(props)
        )
