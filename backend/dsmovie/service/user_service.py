import logging
from typing import Optional

from dsmovie.domain.models import User, Role
from dsmovie.repositories import UserRepository
from dsmovie.exceptions.auth import UnauthenticatedException, UsernameNotFoundException

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def authenticated(self, username: Optional[str]) -> User:
        """Resolve the caller's username to a stored user.

        Every failure, including a repository error, is reported as
        UnauthenticatedException; the cause only goes to the log.
        """
        try:
            if not username:
                raise UnauthenticatedException("No authenticated identity")
            user = self.user_repository.get_by_username(username)
            if user is None:
                raise UnauthenticatedException(f"No user named {username}")
            return user
        except Exception as e:
            logger.warning(f"Authentication failed for {username!r}: {str(e)}")
            raise UnauthenticatedException("Invalid user") from None

    def load_user_by_username(self, username: str) -> User:
        """Build the login aggregate from the (user, role) projection rows."""
        rows = self.user_repository.search_user_and_roles_by_username(username)
        if not rows:
            raise UsernameNotFoundException("Username not found")

        user = User(username=rows[0].username, password=rows[0].password)
        for row in rows:
            user.add_role(Role(id=row.role_id, authority=row.authority))

        return user
