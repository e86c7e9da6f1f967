from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple

from dsmovie.db.models import MovieORM
from dsmovie.domain.dto import PageRequest
from dsmovie.domain.models import Movie, Score
from dsmovie.repositories.interface.movie_repository import MovieRepository
from dsmovie.exceptions.repository import (
    IntegrityViolationException,
    RepositoryOperationException,
    InvalidEntityDataException
)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyMovieRepo(MovieRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_domain(self, movie_orm: MovieORM, with_scores: bool = False) -> Movie:
        try:
            scores = None
            if with_scores:
                scores = [
                    Score(movie_id=s.movie_id, user_id=s.user_id, value=s.value)
                    for s in movie_orm.scores
                ]
            return Movie(
                id=movie_orm.id,
                title=movie_orm.title,
                score=movie_orm.score if movie_orm.score is not None else 0.0,
                count=movie_orm.count if movie_orm.count is not None else 0,
                image=movie_orm.image,
                scores=scores
            )
        except Exception as e:
            raise InvalidEntityDataException(f"Failed to convert movie data: {str(e)}")

    def _to_orm(self, movie: Movie) -> MovieORM:
        return MovieORM(
            id=movie.id,
            title=movie.title,
            score=movie.score,
            count=movie.count,
            image=movie.image
        )

    def get_by_id(self, movie_id: int) -> Optional[Movie]:
        try:
            if not isinstance(movie_id, int):
                raise RepositoryOperationException(f"Invalid movie_id type. Expected int, got {type(movie_id)}")

            movie_orm = self.session.get(MovieORM, movie_id)
            if not movie_orm:
                return None
            return self._to_domain(movie_orm, with_scores=True)
        except (InvalidEntityDataException, RepositoryOperationException):
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get movie by ID: {str(e)}")

    def search_by_title(self, title: str, page_request: PageRequest) -> Tuple[List[Movie], int]:
        try:
            query = self.session.query(MovieORM)
            if title:
                query = query.filter(MovieORM.title.ilike(f"%{_escape_like(title)}%", escape="\\"))

            total = query.count()

            if page_request.sort_field:
                column = getattr(MovieORM, page_request.sort_field)
                query = query.order_by(column.desc() if page_request.sort_descending else column.asc(), MovieORM.id)
            else:
                query = query.order_by(MovieORM.id)

            movies_orm = query.offset(page_request.offset).limit(page_request.size).all()
            return [self._to_domain(movie_orm) for movie_orm in movies_orm], total
        except InvalidEntityDataException:
            raise
        except Exception as e:
            raise RepositoryOperationException(f"Failed to search movies by title: {str(e)}")

    def exists_by_id(self, movie_id: int) -> bool:
        try:
            return self.session.query(MovieORM.id).filter(MovieORM.id == movie_id).first() is not None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to check movie existence: {str(e)}")

    def create(self, movie: Movie) -> Movie:
        try:
            movie_orm = self._to_orm(movie)
            self.session.add(movie_orm)
            self.session.commit()
            self.session.refresh(movie_orm)
            return self._to_domain(movie_orm)
        except Exception as e:
            self.session.rollback()
            raise RepositoryOperationException(f"Failed to create movie: {str(e)}")

    def update(self, movie: Movie) -> Movie:
        try:
            movie_orm = self.session.get(MovieORM, movie.id)
            if not movie_orm:
                raise RepositoryOperationException(f"Movie {movie.id} does not exist")

            movie_orm.title = movie.title
            movie_orm.image = movie.image
            movie_orm.score = movie.score
            movie_orm.count = movie.count

            self.session.commit()
            self.session.refresh(movie_orm)
            return self._to_domain(movie_orm)
        except RepositoryOperationException:
            raise
        except Exception as e:
            self.session.rollback()
            raise RepositoryOperationException(f"Failed to update movie: {str(e)}")

    def delete_by_id(self, movie_id: int) -> bool:
        try:
            movie_orm = self.session.get(MovieORM, movie_id)
            if not movie_orm:
                return False

            self.session.delete(movie_orm)
            self.session.commit()
            return True
        except IntegrityError as e:
            self.session.rollback()
            raise IntegrityViolationException(f"Movie {movie_id} is still referenced: {str(e.orig)}")
        except Exception as e:
            self.session.rollback()
            raise RepositoryOperationException(f"Failed to delete movie: {str(e)}")
