from datetime import datetime
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StoreError, UserAlreadyExistedError, UserNotFoundError
from app.models.user import User


class UserStore(Protocol):
    def find_by_id(self, user_id: str) -> User: ...

    def find_by_mail_address(self, mail_address: str) -> User: ...

    def create(self, user: User) -> None: ...

    def update_last_logged_in_at(self, user: User, logged_in_at: datetime) -> None: ...

    def delete_by_mail_address(self, mail_address: str) -> None: ...


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, user_id: str) -> User:
        try:
            user = self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError(f"find user id={user_id}") from e
        if user is None:
            raise UserNotFoundError(f"find user id={user_id}")
        return user

    def find_by_mail_address(self, mail_address: str) -> User:
        try:
            user = self.session.execute(
                select(User).where(User.mail_address == mail_address)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"find user mail_address={mail_address}") from e
        if user is None:
            raise UserNotFoundError(f"find user mail_address={mail_address}")
        return user

    def create(self, user: User) -> None:
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise UserAlreadyExistedError(f"create user mail_address={user.mail_address}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"create user mail_address={user.mail_address}") from e

    def update_last_logged_in_at(self, user: User, logged_in_at: datetime) -> None:
        user.last_logged_in_at = logged_in_at
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"update user id={user.id}") from e

    def delete_by_mail_address(self, mail_address: str) -> None:
        try:
            result = self.session.execute(delete(User).where(User.mail_address == mail_address))
        except SQLAlchemyError as e:
            raise StoreError(f"delete user mail_address={mail_address}") from e
        if result.rowcount == 0:
            raise UserNotFoundError(f"delete user mail_address={mail_address}")
