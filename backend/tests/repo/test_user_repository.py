import pytest

from dsmovie.db.models import UserORM, RoleORM
from dsmovie.domain.models import User, Role
from dsmovie.repositories.implementation.sql_alchemy_user_repo import SQLAlchemyUserRepo
from dsmovie.exceptions.repository import (
    IntegrityViolationException,
    RepositoryOperationException
)


@pytest.fixture
def user_repo(session):
    """Create a user repository instance."""
    return SQLAlchemyUserRepo(session)


@pytest.fixture
def test_users(session):
    """Create roles and users: Maria is client and admin, Bob is client, Carl has no role."""
    client = RoleORM(id=1, authority="ROLE_CLIENT")
    admin = RoleORM(id=2, authority="ROLE_ADMIN")
    maria = UserORM(id=1, name="Maria", username="maria@gmail.com", password="hashed_pw1", roles=[client, admin])
    bob = UserORM(id=2, name="Bob", username="bob@gmail.com", password="hashed_pw2", roles=[client])
    carl = UserORM(id=3, name="Carl", username="carl@gmail.com", password="hashed_pw3")
    session.add_all([client, admin, maria, bob, carl])
    session.commit()
    return [maria, bob, carl]


def test_get_by_username(user_repo, test_users):
    user = user_repo.get_by_username("maria@gmail.com")
    assert user is not None
    assert user.id == 1
    assert user.name == "Maria"
    assert user.authorities == ["ROLE_ADMIN", "ROLE_CLIENT"]


def test_get_by_username_unknown(user_repo, test_users):
    assert user_repo.get_by_username("nobody@gmail.com") is None


def test_search_user_and_roles_one_row_per_role(user_repo, test_users):
    rows = user_repo.search_user_and_roles_by_username("maria@gmail.com")
    assert [(r.username, r.password, r.role_id, r.authority) for r in rows] == [
        ("maria@gmail.com", "hashed_pw1", 1, "ROLE_CLIENT"),
        ("maria@gmail.com", "hashed_pw1", 2, "ROLE_ADMIN"),
    ]


def test_search_user_and_roles_single_role(user_repo, test_users):
    rows = user_repo.search_user_and_roles_by_username("bob@gmail.com")
    assert len(rows) == 1
    assert rows[0].authority == "ROLE_CLIENT"


def test_search_user_and_roles_user_without_roles(user_repo, test_users):
    assert user_repo.search_user_and_roles_by_username("carl@gmail.com") == []


def test_search_user_and_roles_unknown_user(user_repo, test_users):
    assert user_repo.search_user_and_roles_by_username("nobody@gmail.com") == []


def test_create_user_with_roles(user_repo, test_users):
    created = user_repo.create(User(
        name="Ana",
        username="ana@gmail.com",
        password="hashed_pw4",
        roles={Role(id=1, authority="ROLE_CLIENT")}
    ))
    assert created.id is not None
    assert created.authorities == ["ROLE_CLIENT"]
    assert len(user_repo.search_user_and_roles_by_username("ana@gmail.com")) == 1


def test_create_duplicate_username(user_repo, test_users):
    with pytest.raises(IntegrityViolationException):
        user_repo.create(User(username="bob@gmail.com", password="other"))


def test_create_user_with_unknown_role(user_repo, test_users):
    with pytest.raises(RepositoryOperationException):
        user_repo.create(User(username="ana@gmail.com", password="pw", roles={Role(id=99, authority="ROLE_X")}))


def test_roles(user_repo, test_users):
    assert user_repo.get_role_by_authority("ROLE_ADMIN") == Role(id=2, authority="ROLE_ADMIN")
    assert user_repo.get_role_by_authority("ROLE_X") is None

    created = user_repo.create_role(Role(authority="ROLE_OPERATOR"))
    assert created.id is not None

    with pytest.raises(IntegrityViolationException):
        user_repo.create_role(Role(authority="ROLE_CLIENT"))
