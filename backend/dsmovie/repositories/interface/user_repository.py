from abc import ABC, abstractmethod
from typing import List, Optional

from dsmovie.domain.models import User, Role, UserDetailsProjection


class UserRepository(ABC):
    @abstractmethod
    def get_by_username(self, username: str) -> Optional["User"]:
        pass

    @abstractmethod
    def search_user_and_roles_by_username(self, username: str) -> List["UserDetailsProjection"]:
        pass

    @abstractmethod
    def create(self, user: "User") -> "User":
        pass

    @abstractmethod
    def get_role_by_authority(self, authority: str) -> Optional["Role"]:
        pass

    @abstractmethod
    def create_role(self, role: "Role") -> "Role":
        pass
