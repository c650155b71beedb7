import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import Conflict, NotFound
from ..core.security import UserRole, get_password_hash
from ..models.user import User
from ..schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def _email_taken(self, email: str, exclude_id: int = None) -> bool:
        query = self.db.query(User).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Email already registered")

    def create_user(self, name: str, email: str, password: str, role: UserRole) -> User:
        if self._email_taken(email):
            raise Conflict("Email already registered")

        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=True,
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)

        logger.info(f"User {user.id} created with role {user.role.value}")
        return user

    def create(self, data: UserCreate) -> User:
        return self.create_user(data.name, data.email, data.password, data.role)

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def update(self, user_id: int, data: UserUpdate) -> User:
        user = self.get(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and self._email_taken(changes["email"], exclude_id=user.id):
            raise Conflict("Email already registered")

        password = changes.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)

        for field, value in changes.items():
            setattr(user, field, value)

        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User {user_id} deleted")
