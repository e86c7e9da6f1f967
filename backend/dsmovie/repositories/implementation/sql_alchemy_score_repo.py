from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from dsmovie.db.models import ScoreORM, MovieORM
from dsmovie.domain.models import Score, ScoreKey, Movie
from dsmovie.repositories.interface.score_repository import ScoreRepository
from dsmovie.exceptions.repository import (
    IntegrityViolationException,
    RepositoryOperationException,
    InvalidEntityDataException
)


class SQLAlchemyScoreRepo(ScoreRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_domain(self, score_orm: ScoreORM) -> Score:
        try:
            return Score(
                movie_id=score_orm.movie_id,
                user_id=score_orm.user_id,
                value=score_orm.value
            )
        except Exception as e:
            raise InvalidEntityDataException(f"Failed to convert score data: {str(e)}")

    def get_by_key(self, key: ScoreKey) -> Optional[Score]:
        try:
            score_orm = self.session.get(ScoreORM, (key.movie_id, key.user_id))
            return self._to_domain(score_orm) if score_orm else None
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get score by movie and user: {str(e)}")

    def get_movie_scores(self, movie_id: int) -> List[Score]:
        try:
            scores_orm = self.session.query(ScoreORM).filter(
                ScoreORM.movie_id == movie_id
            ).all()
            return [self._to_domain(s) for s in scores_orm]
        except Exception as e:
            raise RepositoryOperationException(f"Failed to get movie scores: {str(e)}")

    def save_with_movie_aggregate(self, score: Score, movie: Movie) -> Score:
        try:
            score_orm = self.session.get(ScoreORM, (score.movie_id, score.user_id))
            if score_orm:
                score_orm.value = score.value
            else:
                score_orm = ScoreORM(
                    movie_id=score.movie_id,
                    user_id=score.user_id,
                    value=score.value
                )
                self.session.add(score_orm)

            # the score row goes out before the aggregate that counts it
            self.session.flush()

            movie_orm = self.session.get(MovieORM, movie.id)
            if not movie_orm:
                raise RepositoryOperationException(f"Movie {movie.id} disappeared while saving score")
            movie_orm.score = movie.score
            movie_orm.count = movie.count

            self.session.commit()
            return self._to_domain(score_orm)
        except IntegrityError as e:
            self.session.rollback()
            raise IntegrityViolationException(f"Score references a missing movie or user: {str(e.orig)}")
        except RepositoryOperationException:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            raise RepositoryOperationException(f"Failed to save score: {str(e)}")
