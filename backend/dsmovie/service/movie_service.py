import logging
from typing import Any, Optional

from dsmovie.domain.dto import MovieCreate, MovieDTO, Page, PageRequest
from dsmovie.domain.models import Movie
from dsmovie.repositories.interface.movie_repository import MovieRepository
from dsmovie.exceptions.repository import IntegrityViolationException
from dsmovie.exceptions.service import ResourceNotFoundException, ReferentialIntegrityException
from dsmovie.service.validation import validate_input

logger = logging.getLogger(__name__)


class MovieService:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    def find_all(self, title: Optional[str], page_request: Any = None) -> Page[MovieDTO]:
        page_request = validate_input(PageRequest, page_request if page_request is not None else {})
        movies, total = self.movie_repository.search_by_title(title or "", page_request)
        return Page[MovieDTO].of(
            [MovieDTO.model_validate(movie) for movie in movies],
            page_request,
            total
        )

    def find_by_id(self, movie_id: int) -> MovieDTO:
        movie = self._get_movie(movie_id)
        return MovieDTO.model_validate(movie)

    def insert(self, data: Any) -> MovieDTO:
        data = validate_input(MovieCreate, data)
        movie = Movie(title=data.title, image=data.image, score=0.0, count=0)
        movie = self.movie_repository.create(movie)
        logger.info(f"Created movie {movie.id} ({movie.title})")
        return MovieDTO.model_validate(movie)

    def update(self, movie_id: int, data: Any) -> MovieDTO:
        data = validate_input(MovieCreate, data)
        movie = self._get_movie(movie_id)

        # score and count belong to the score aggregation, not to catalog edits
        movie.title = data.title
        movie.image = data.image

        movie = self.movie_repository.update(movie)
        logger.info(f"Updated movie {movie.id}")
        return MovieDTO.model_validate(movie)

    def delete(self, movie_id: int) -> None:
        if not self.movie_repository.exists_by_id(movie_id):
            raise ResourceNotFoundException("Resource not found")
        try:
            deleted = self.movie_repository.delete_by_id(movie_id)
        except IntegrityViolationException as e:
            logger.warning(f"Refused to delete movie {movie_id}: {str(e)}")
            raise ReferentialIntegrityException("Referential integrity failure") from e

        # a concurrent delete got there first
        if not deleted:
            raise ResourceNotFoundException("Resource not found")
        logger.info(f"Deleted movie {movie_id}")

    def _get_movie(self, movie_id: int) -> Movie:
        movie = self.movie_repository.get_by_id(movie_id)
        if movie is None:
            raise ResourceNotFoundException("Resource not found")
        return movie
