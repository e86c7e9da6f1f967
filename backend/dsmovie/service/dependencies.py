from fastapi import Depends
from sqlalchemy.orm import Session

from dsmovie.db.database import get_db
from dsmovie.repositories import SQLAlchemyUserRepo, SQLAlchemyScoreRepo, SQLAlchemyMovieRepo
from dsmovie.service.auth_service import AuthService
from dsmovie.service.movie_service import MovieService
from dsmovie.service.score_service import ScoreService
from dsmovie.service.user_service import UserService

def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(SQLAlchemyUserRepo(db))

def get_auth_service(user_service: UserService = Depends(get_user_service)) -> AuthService:
    return AuthService(user_service)

def get_score_service(db: Session = Depends(get_db)) -> ScoreService:
    return ScoreService(
        user_service=UserService(SQLAlchemyUserRepo(db)),
        movie_repo=SQLAlchemyMovieRepo(db),
        score_repo=SQLAlchemyScoreRepo(db)
    )

def get_movie_service(db: Session = Depends(get_db)) -> MovieService:
    return MovieService(SQLAlchemyMovieRepo(db))
