import logging

from app.core.errors import (
    AuthenticationError,
    PasswordTooLongError,
    UserMailAddressAlreadyExistedError,
    UserNotFoundError,
)
from app.core.security import MAX_PASSWORD_BYTES, get_password_hash, verify_password
from app.models.common import generate_id, utcnow
from app.models.user import User
from app.repositories.user import UserStore

logger = logging.getLogger(__name__)


class UserService:
    """Admin user use cases"""

    def __init__(self, user_repository: UserStore):
        self.user_repository = user_repository

    def store_user(self, mail_address: str, password: str) -> User:
        try:
            self.user_repository.find_by_mail_address(mail_address)
        except UserNotFoundError:
            pass
        else:
            raise UserMailAddressAlreadyExistedError(f"store user mail_address={mail_address}")

        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise PasswordTooLongError(f"store user mail_address={mail_address}")

        user = User(
            id=generate_id(),
            mail_address=mail_address,
            password_hash=get_password_hash(password),
        )
        self.user_repository.create(user)
        logger.info("created admin user %s", user.id)
        return user

    def get_user_by_mail_address(self, mail_address: str) -> User:
        return self.user_repository.find_by_mail_address(mail_address)

    def authenticate(self, mail_address: str, password: str) -> User:
        """Check credentials, returning the user on success"""
        try:
            user = self.user_repository.find_by_mail_address(mail_address)
        except UserNotFoundError as e:
            logger.debug("admin user not found mail_address=%s", mail_address)
            raise AuthenticationError(f"authenticate mail_address={mail_address}") from e
        if not verify_password(password, user.password_hash):
            raise AuthenticationError(f"authenticate mail_address={mail_address}")
        return user

    def update_last_logged_in_at(self, user: User) -> None:
        self.user_repository.update_last_logged_in_at(user, utcnow())

    def delete_user_by_mail_address(self, mail_address: str) -> None:
        self.user_repository.delete_by_mail_address(mail_address)
        logger.info("deleted admin user mail_address=%s", mail_address)
