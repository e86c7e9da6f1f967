from dsmovie.repositories.interface.movie_repository import MovieRepository
from dsmovie.repositories.interface.score_repository import ScoreRepository
from dsmovie.repositories.interface.user_repository import UserRepository
from dsmovie.repositories.implementation.sql_alchemy_movie_repo import SQLAlchemyMovieRepo
from dsmovie.repositories.implementation.sql_alchemy_score_repo import SQLAlchemyScoreRepo
from dsmovie.repositories.implementation.sql_alchemy_user_repo import SQLAlchemyUserRepo

__all__ = [
    "MovieRepository",
    "ScoreRepository",
    "UserRepository",
    "SQLAlchemyMovieRepo",
    "SQLAlchemyScoreRepo",
    "SQLAlchemyUserRepo",
]
