"""Domain errors.

Every error raised by the stores and services derives from ``BlogError``.
An error carries the operation it was raised from (``context``) so that
``str(err)`` reads like ``"find tag name=go: tag not found"``. Services add
further context with ``add_note`` and re-raise the same object, so callers
can always branch on the concrete class.
"""

from typing import Optional


class BlogError(Exception):
    """Base class for all blog backend errors."""

    message = "blog error"

    def __init__(self, context: Optional[str] = None) -> None:
        self.context = context
        super().__init__(f"{context}: {self.message}" if context else self.message)


class NotFoundError(BlogError):
    message = "not found"


class AlreadyExistedError(BlogError):
    message = "has already existed"


class StoreError(BlogError):
    """Any store failure other than not-found or a uniqueness violation."""
    message = "store error"


class PostNotFoundError(NotFoundError):
    message = "post not found"


class TagNotFoundError(NotFoundError):
    message = "tag not found"


class PostsTagsNotFoundError(NotFoundError):
    message = "posts_tags not found"


class UserNotFoundError(NotFoundError):
    message = "user not found"


class PostAlreadyExistedError(AlreadyExistedError):
    message = "post has already existed"


class PermalinkAlreadyExistedError(AlreadyExistedError):
    message = "permalink has already existed"


class TagAlreadyExistedError(AlreadyExistedError):
    message = "tag has already existed"


class TagNameAlreadyExistedError(AlreadyExistedError):
    message = "tag name has already existed"


class PostsTagsAlreadyExistedError(AlreadyExistedError):
    message = "posts_tags has already existed"


class UserAlreadyExistedError(AlreadyExistedError):
    message = "user has already existed"


class UserMailAddressAlreadyExistedError(AlreadyExistedError):
    message = "user mail address has already existed"


class PasswordTooLongError(BlogError):
    message = "password is too long (must be 72 bytes or less)"


class AuthenticationError(BlogError):
    message = "incorrect mail address or password"


class InvalidSortError(BlogError):
    message = "invalid sort condition"


class ImageStorageError(BlogError):
    message = "image storage error"


class ImageStorageNotConfiguredError(ImageStorageError):
    message = "image storage is not configured"


INTERNAL_SERVER_ERROR = "internal server error"
