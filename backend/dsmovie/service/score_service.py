import logging
from typing import Any, Optional

from dsmovie.domain.dto import MovieDTO, ScoreCreate
from dsmovie.domain.models import Movie, Score, ScoreKey
from dsmovie.repositories import MovieRepository, ScoreRepository
from dsmovie.exceptions.repository import IntegrityViolationException
from dsmovie.exceptions.service import ResourceNotFoundException
from dsmovie.service.user_service import UserService
from dsmovie.service.validation import validate_input

logger = logging.getLogger(__name__)


class ScoreService:
    def __init__(self, user_service: UserService, movie_repo: MovieRepository, score_repo: ScoreRepository):
        self.user_service = user_service
        self.movie_repo = movie_repo
        self.score_repo = score_repo

    def save_score(self, username: Optional[str], data: Any) -> MovieDTO:
        """Record the caller's score for a movie and refresh the movie's mean score.

        A second submission by the same user replaces the first one, so the
        movie's count is the number of distinct users who scored it.
        """
        data = validate_input(ScoreCreate, data)
        user = self.user_service.authenticated(username)

        movie = self.movie_repo.get_by_id(data.movie_id)
        if movie is None:
            raise ResourceNotFoundException("Resource not found")

        score = self._upsert(movie, ScoreKey(movie_id=movie.id, user_id=user.id), data.score)
        self._recompute_aggregate(movie)

        try:
            self.score_repo.save_with_movie_aggregate(score, movie)
        except IntegrityViolationException as e:
            # the movie or the user row went away after the lookup
            raise ResourceNotFoundException("Movie or user no longer exists") from e

        logger.info(
            f"User {user.id} scored movie {movie.id} with {score.value}; "
            f"movie score is now {movie.score} over {movie.count} scores"
        )
        return MovieDTO.model_validate(movie)

    def _upsert(self, movie: Movie, key: ScoreKey, value: float) -> Score:
        for score in movie.scores:
            if score.key == key:
                score.value = value
                return score

        score = Score(movie_id=key.movie_id, user_id=key.user_id, value=value)
        movie.scores.append(score)
        return score

    def _recompute_aggregate(self, movie: Movie) -> None:
        values = [score.value for score in movie.scores]
        movie.count = len(values)
        movie.score = sum(values) / len(values) if values else 0.0
