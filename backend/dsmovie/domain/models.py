from dataclasses import dataclass
from typing import Optional, List, Set


class Role:
    def __init__(self, authority: str, id: Optional[int] = None):
        self.authority = authority
        self.id = id

    # roles are the same role when they share an id
    def __eq__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Role(id={self.id!r}, authority={self.authority!r})"


class User:
    def __init__(
        self,
        username: str,
        password: str,
        name: Optional[str] = None,
        id: Optional[int] = None,
        roles: Optional[Set[Role]] = None
    ):
        self.username = username
        self.password = password
        self.name = name
        self.id = id
        self.roles = set(roles) if roles else set()

    def add_role(self, role: Role) -> None:
        self.roles.add(role)

    def has_role(self, authority: str) -> bool:
        return any(role.authority == authority for role in self.roles)

    @property
    def authorities(self) -> List[str]:
        return sorted(role.authority for role in self.roles)


@dataclass(frozen=True)
class ScoreKey:
    movie_id: int
    user_id: int


class Score:
    def __init__(self, movie_id: int, user_id: int, value: float):
        self.movie_id = movie_id
        self.user_id = user_id
        self.value = value

    @property
    def key(self) -> ScoreKey:
        return ScoreKey(movie_id=self.movie_id, user_id=self.user_id)


class Movie:
    def __init__(
        self,
        title: str,
        score: float = 0.0,
        count: int = 0,
        image: Optional[str] = None,
        id: Optional[int] = None,
        scores: Optional[List[Score]] = None
    ):
        self.title = title
        self.score = score
        self.count = count
        self.image = image
        self.id = id
        self.scores = list(scores) if scores else []


class UserDetailsProjection:
    """One login row per (user, role) pair."""

    def __init__(self, username: str, password: str, role_id: int, authority: str):
        self.username = username
        self.password = password
        self.role_id = role_id
        self.authority = authority
