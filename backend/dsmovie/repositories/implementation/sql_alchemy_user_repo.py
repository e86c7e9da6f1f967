from sqlalchemy.orm import Session
from typing import Optional, List
from sqlalchemy.exc import IntegrityError

from dsmovie.domain.models import User, Role, UserDetailsProjection
from dsmovie.db.models import UserORM, RoleORM, user_role_table
from dsmovie.repositories.interface.user_repository import UserRepository
from dsmovie.exceptions.repository import (
    IntegrityViolationException,
    RepositoryOperationException,
)

class SQLAlchemyUserRepo(UserRepository):
    def __init__(self, db: Session):
        self.db = db

    def _role_to_domain(self, role_orm: RoleORM) -> Role:
        return Role(id=role_orm.id, authority=role_orm.authority)

    def _to_domain(self, user_orm: UserORM) -> User:
        return User(
            id=user_orm.id,
            name=user_orm.name,
            username=user_orm.username,
            password=user_orm.password,
            roles={self._role_to_domain(r) for r in user_orm.roles}
        )

    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username"""
        try:
            user_orm = self.db.query(UserORM).filter(UserORM.username == username).first()
            return self._to_domain(user_orm) if user_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get user by username: {str(e)}")

    def search_user_and_roles_by_username(self, username: str) -> List[UserDetailsProjection]:
        """One row per role the user holds; no rows for unknown users or users without roles"""
        try:
            rows = (
                self.db.query(UserORM.username, UserORM.password, RoleORM.id, RoleORM.authority)
                .join(user_role_table, user_role_table.c.user_id == UserORM.id)
                .join(RoleORM, RoleORM.id == user_role_table.c.role_id)
                .filter(UserORM.username == username)
                .order_by(RoleORM.id)
                .all()
            )
            return [
                UserDetailsProjection(
                    username=row[0],
                    password=row[1],
                    role_id=row[2],
                    authority=row[3]
                )
                for row in rows
            ]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to search user and roles: {str(e)}")

    def create(self, user: User) -> User:
        """Create a new user; its roles must already exist"""
        try:
            user_orm = UserORM(
                id=user.id,
                name=user.name,
                username=user.username,
                password=user.password
            )
            for role in user.roles:
                role_orm = self.db.get(RoleORM, role.id)
                if not role_orm:
                    raise RepositoryOperationException(f"Role {role.id} does not exist")
                user_orm.roles.append(role_orm)

            self.db.add(user_orm)
            self.db.commit()
            self.db.refresh(user_orm)
            return self._to_domain(user_orm)
        except RepositoryOperationException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise IntegrityViolationException(f"User {user.username} already exists")
        except Exception as e:
            self.db.rollback()
            raise RepositoryOperationException(f"Failed to create user: {str(e)}")

    def get_role_by_authority(self, authority: str) -> Optional[Role]:
        try:
            role_orm = self.db.query(RoleORM).filter(RoleORM.authority == authority).first()
            return self._role_to_domain(role_orm) if role_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get role by authority: {str(e)}")

    def create_role(self, role: Role) -> Role:
        try:
            role_orm = RoleORM(id=role.id, authority=role.authority)
            self.db.add(role_orm)
            self.db.commit()
            self.db.refresh(role_orm)
            return self._role_to_domain(role_orm)
        except IntegrityError:
            self.db.rollback()
            raise IntegrityViolationException(f"Role {role.authority} already exists")
        except Exception as e:
            self.db.rollback()
            raise RepositoryOperationException(f"Failed to create role: {str(e)}")
