"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import User
from copydrive.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    id_prefix = "usr"

    def __init__(self):
        super().__init__(User)

    def get_by_email(self, db: Session, email: str) -> User | None:
        """Get user by email (case-insensitive).

        Args:
            db: Database session
            email: User email

        Returns:
            User or None if not found
        """
        stmt = select(User).where(User.email == email.strip().lower())
        return db.execute(stmt).scalar_one_or_none()

    def create_user(
        self,
        db: Session,
        name: str,
        email: str,
        hashed_password: str | None = None,
        is_admin: bool = False,
        commit: bool = True,
    ) -> User:
        """Create a new user.

        Args:
            db: Database session
            name: Display name
            email: Login email (stored lower-case)
            hashed_password: bcrypt hash
            is_admin: Platform administrator flag

        Returns:
            Created user
        """
        user_data = {
            "name": name,
            "email": email.strip().lower(),
            "hashed_password": hashed_password,
            "is_admin": is_admin,
        }
        return self.create(db, user_data, commit=commit)


user_repository = UserRepository()
