"""
Typed models for Makuwro API responses.

Models are plain dataclasses built from decoded response bodies with
``from_dict``. They hold no reference to a client: actions that need the
network take the client as their first argument and forward to it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type, Union, TYPE_CHECKING

from .exceptions import RequiredVariableError

if TYPE_CHECKING:
    from .api.client import MakuwroClient


# =============================================================================
# Type tags
# =============================================================================


class AccountType(Enum):
    """Account kinds and their API directory names."""

    USER = "user"
    TEAM = "team"

    @property
    def directory(self) -> str:
        return self.value


class ContentType(Enum):
    """Content kinds and their API directory names."""

    ART = "art"
    BLOG_POST = "blogs"
    CHARACTER = "characters"
    STORY = "stories"
    COMMENT = "comments"
    NOTIFICATION = "notifications"

    @property
    def directory(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["ContentType", str]) -> "ContentType":
        """Accept a member, its name ("blog_post") or its directory ("blogs")."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        for member in cls:
            if key.lower() in (member.name.lower(), member.value):
                return member
        raise ValueError(f"Unknown content type: {value}")


# =============================================================================
# Accounts
# =============================================================================


@dataclass
class Account:
    """Identity record shared by users and teams."""

    account_type: ClassVar[Optional[AccountType]] = None

    id: str
    username: str
    display_name: Optional[str] = None
    avatar_path: Optional[str] = None
    banner_path: Optional[str] = None
    css: Optional[str] = None
    terms: Optional[str] = None
    is_banned: bool = False

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": data.get("id", ""),
            "username": data.get("username", ""),
            "display_name": data.get("displayName"),
            "avatar_path": data.get("avatarPath"),
            "banner_path": data.get("bannerPath"),
            "css": data.get("css"),
            "terms": data.get("terms"),
            "is_banned": bool(data.get("isBanned", False)),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from API response dict."""
        return cls(**cls._parse(data))

    def is_same_account(self, username: Optional[str]) -> bool:
        """Compare usernames case-insensitively."""
        if not username or not self.username:
            return False
        return self.username.lower() == username.lower()

    # Delegated actions

    def create_art(self, client: "MakuwroClient", slug: Optional[str] = None,
                   props: Optional[Dict[str, Any]] = None) -> "Art":
        return client.create_content(ContentType.ART, self.username, slug, props)

    def create_blog_post(self, client: "MakuwroClient", slug: Optional[str] = None,
                         props: Optional[Dict[str, Any]] = None) -> "BlogPost":
        return client.create_content(ContentType.BLOG_POST, self.username, slug, props)

    def create_character(self, client: "MakuwroClient", slug: Optional[str] = None,
                         props: Optional[Dict[str, Any]] = None) -> "Character":
        return client.create_content(ContentType.CHARACTER, self.username, slug, props)

    def create_story(self, client: "MakuwroClient", slug: Optional[str] = None,
                     props: Optional[Dict[str, Any]] = None) -> "Story":
        return client.create_content(ContentType.STORY, self.username, slug, props)

    def get_content(self, client: "MakuwroClient", content_type: ContentType, slug: str) -> "Content":
        return client.get_content(content_type, self.username, slug)

    def get_all_content(self, client: "MakuwroClient", content_type: ContentType) -> List["Content"]:
        return client.get_all_content(content_type, self.username)

    def update(self, client: "MakuwroClient", props: Dict[str, Any]) -> "Account":
        return client.update_account(self._require_type(), self.username, props)

    def disable(self, client: "MakuwroClient", password: str) -> None:
        client.disable_account(self._require_type(), self.username, password)

    def delete(self, client: "MakuwroClient", password: str) -> None:
        client.delete_account(self._require_type(), self.username, password)

    def _require_type(self) -> AccountType:
        if self.account_type is None:
            raise RequiredVariableError("account type")
        return self.account_type


@dataclass
class User(Account):
    """A Makuwro user."""

    account_type: ClassVar[Optional[AccountType]] = AccountType.USER

    is_staff: bool = False
    last_online: Optional[int] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs.update(
            is_staff=bool(data.get("isStaff", False)),
            last_online=data.get("lastOnline"),
        )
        return kwargs


@dataclass
class Team(Account):
    """A team account."""

    account_type: ClassVar[Optional[AccountType]] = AccountType.TEAM


OwnerData = Union[User, Dict[str, Any], None]


def hydrate_owner(owner: OwnerData) -> Optional[User]:
    """Turn a raw owner dict into a User; a User passes through unchanged."""
    if owner is None or isinstance(owner, User):
        return owner
    if isinstance(owner, dict):
        return User.from_dict(owner)
    raise TypeError(f"Cannot hydrate owner from {type(owner).__name__}")


# =============================================================================
# Content
# =============================================================================


@dataclass
class Content:
    """Any ownable, sluggable published item."""

    content_type: ClassVar[Optional[ContentType]] = None

    id: str
    slug: Optional[str] = None
    owner: Optional[User] = None
    description: Optional[str] = None
    content_warning: Optional[str] = None
    age_restriction_level: Optional[int] = None
    uploaded_on: Optional[int] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": data.get("id", ""),
            "slug": data.get("slug"),
            "owner": hydrate_owner(data.get("owner")),
            "description": data.get("description"),
            "content_warning": data.get("contentWarning"),
            "age_restriction_level": data.get("ageRestrictionLevel"),
            "uploaded_on": data.get("uploadedOn"),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from API response dict."""
        return cls(**cls._parse(data))

    @property
    def owner_username(self) -> str:
        if self.owner is None or not self.owner.username:
            raise RequiredVariableError("owner")
        return self.owner.username

    def _require_type(self) -> ContentType:
        if self.content_type is None:
            raise RequiredVariableError("content type")
        return self.content_type

    def update(self, client: "MakuwroClient", props: Dict[str, Any]) -> "Content":
        """Ask the server to update this item; returns the updated copy."""
        return client.update_content(self._require_type(), self.owner_username, self.slug, props)

    def delete(self, client: "MakuwroClient") -> None:
        """
        Ask the server to delete this item.

        The authenticated user must have access to the item.
        """
        client.delete_content(self._require_type(), self.owner_username, self.slug)

    def comment(self, client: "MakuwroClient", props: Dict[str, Any]) -> "Comment":
        """Post a threaded comment on this item."""
        return client.create_content(
            self._require_type(), self.owner_username, self.slug, props, is_thread=True
        )


@dataclass
class Art(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.ART

    title: Optional[str] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs["title"] = data.get("title")
        return kwargs


@dataclass
class BlogPost(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.BLOG_POST

    title: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs.update(title=data.get("title"), content=data.get("content"))
        return kwargs

    def upload_image(self, client: "MakuwroClient", image: bytes) -> Optional[str]:
        """
        Upload an image for use in this post.

        Args:
            client: Client to upload with
            image: Raw image bytes

        Returns:
            Path of the uploaded image

        Raises:
            UnallowedFileTypeError: If the bytes are not a decodable image
        """
        return client.upload_image(self._require_type(), self.owner_username, self.slug, image)


@dataclass
class Character(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.CHARACTER

    name: Optional[str] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs["name"] = data.get("name")
        return kwargs


@dataclass
class Story(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.STORY

    title: Optional[str] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs["title"] = data.get("title")
        return kwargs


@dataclass
class Comment(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.COMMENT

    content: Optional[str] = None
    parent: Optional[str] = None

    @classmethod
    def _parse(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = super()._parse(data)
        kwargs.update(content=data.get("content"), parent=data.get("parent"))
        return kwargs


@dataclass
class Notification(Content):
    content_type: ClassVar[Optional[ContentType]] = ContentType.NOTIFICATION


# =============================================================================
# Hydration tables
# =============================================================================


CONTENT_MODELS: Dict[ContentType, Type[Content]] = {
    ContentType.ART: Art,
    ContentType.BLOG_POST: BlogPost,
    ContentType.CHARACTER: Character,
    ContentType.STORY: Story,
    ContentType.COMMENT: Comment,
    ContentType.NOTIFICATION: Notification,
}

ACCOUNT_MODELS: Dict[AccountType, Type[Account]] = {
    AccountType.USER: User,
    AccountType.TEAM: Team,
}


def hydrate_content(content_type: ContentType, data: Dict[str, Any]) -> Content:
    """Build the model registered for a content type."""
    return CONTENT_MODELS[content_type].from_dict(data)


def hydrate_account(account_type: AccountType, data: Dict[str, Any]) -> Account:
    """Build the model registered for an account type."""
    return ACCOUNT_MODELS[account_type].from_dict(data)
