"""
Contents API - Generic content CRUD and image uploads.
"""

import io
import logging
from typing import Optional, Dict, Any, List
from urllib.parse import quote

from PIL import Image, UnidentifiedImageError

from ._http import HTTPClient, encode_form, expect_object
from ..exceptions import RequiredVariableError, UnallowedFileTypeError
from ..models import Comment, Content, ContentType, hydrate_content

logger = logging.getLogger(__name__)


def validate_image(image: bytes) -> None:
    """
    Check locally that bytes decode as an image.

    Raises:
        UnallowedFileTypeError: If the bytes are not a readable image
    """
    if not image:
        raise UnallowedFileTypeError("The file is empty.")

    try:
        with io.BytesIO(image) as buffer:
            with Image.open(buffer) as img:
                img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise UnallowedFileTypeError("The file is not an allowed image type.", details=str(e))


class ContentsAPI:
    """
    API for content operations.

    Every content kind shares one pathway; the ContentType tag selects the
    directory and the model used to hydrate responses.
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Contents API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    @staticmethod
    def content_path(
        content_type: ContentType,
        username: Optional[str] = None,
        slug: Optional[str] = None,
        is_thread: bool = False
    ) -> str:
        """Build ``contents/{dir}[/{username}][/{slug}][/comments]``."""
        path = f"contents/{content_type.directory}"
        if username:
            path += f"/{quote(username)}"
        if slug:
            path += f"/{quote(slug)}"
        if is_thread:
            path += "/comments"
        return path

    def create(
        self,
        content_type: ContentType,
        username: str,
        slug: Optional[str] = None,
        props: Optional[Dict[str, Any]] = None,
        is_thread: bool = False
    ) -> Content:
        """
        Create content.

        Args:
            content_type: Kind of content
            username: Owner of the new content
            slug: Slug of the new content, or of the parent when threading
            props: Content fields
            is_thread: Post a comment on the item at ``slug`` instead

        Returns:
            The created content (a Comment when ``is_thread`` is set)
        """
        if not username:
            raise RequiredVariableError("username")

        data = self._http.request(
            self.content_path(content_type, username, slug, is_thread),
            method="POST",
            body=encode_form(props),
            force_body_parse=True
        )

        data = expect_object(data, "the created content")
        if is_thread:
            return Comment.from_dict(data)
        return hydrate_content(content_type, data)

    def get(self, content_type: ContentType, username: str, slug: str) -> Content:
        """Get a single content item."""
        if not username:
            raise RequiredVariableError("username")
        if not slug:
            raise RequiredVariableError("slug")

        data = self._http.request(self.content_path(content_type, username, slug))
        return hydrate_content(content_type, expect_object(data, "the content"))

    def get_all(self, content_type: ContentType, username: str) -> List[Content]:
        """Get every item of a kind posted by an owner; empty when none."""
        if not username:
            raise RequiredVariableError("username")

        data = self._http.request(self.content_path(content_type, username))
        if not data:
            return []
        if isinstance(data, dict):
            data = data.get("data") or []
        return [hydrate_content(content_type, item) for item in data]

    def update(
        self,
        content_type: ContentType,
        username: str,
        slug: str,
        props: Optional[Dict[str, Any]] = None
    ) -> Content:
        """Update a content item and return the server's copy."""
        if not username:
            raise RequiredVariableError("username")

        data = self._http.request(
            self.content_path(content_type, username, slug),
            method="PATCH",
            body=encode_form(props),
            force_body_parse=True
        )
        return hydrate_content(content_type, expect_object(data, "the updated content"))

    def delete(self, content_type: ContentType, username: str, slug: str) -> None:
        """Delete a content item."""
        if not username:
            raise RequiredVariableError("username")
        if not slug:
            raise RequiredVariableError("slug")

        self._http.request(self.content_path(content_type, username, slug), method="DELETE")

    def upload_image(
        self,
        content_type: ContentType,
        username: str,
        slug: str,
        image: bytes
    ) -> Optional[str]:
        """
        Upload an image attached to a content item.

        The bytes are decoded locally first so a non-image never reaches the
        server.

        Args:
            content_type: Kind of content
            username: Owner of the content
            slug: Slug of the content
            image: Raw image bytes

        Returns:
            Path of the uploaded image

        Raises:
            UnallowedFileTypeError: If the bytes are not a decodable image
        """
        validate_image(image)

        if not username:
            raise RequiredVariableError("username")
        if not slug:
            raise RequiredVariableError("slug")

        path = self.content_path(content_type, username, slug) + "/images"
        logger.debug("Uploading %d byte image to %s", len(image), path)

        data = self._http.request(
            path,
            method="POST",
            body=encode_form({"image": bytes(image)}),
            force_body_parse=True
        )

        if isinstance(data, dict):
            return data.get("imagePath") or data.get("path")
        return data
