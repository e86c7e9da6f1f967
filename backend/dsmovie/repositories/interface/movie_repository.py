from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from dsmovie.domain.dto import PageRequest
from dsmovie.domain.models import Movie


class MovieRepository(ABC):
    @abstractmethod
    def get_by_id(self, movie_id: int) -> Optional["Movie"]:
        pass

    @abstractmethod
    def search_by_title(self, title: str, page_request: PageRequest) -> Tuple[List["Movie"], int]:
        """Case-insensitive substring search. Returns the page content and the total match count."""
        pass

    @abstractmethod
    def exists_by_id(self, movie_id: int) -> bool:
        pass

    @abstractmethod
    def create(self, movie: Movie) -> "Movie":
        pass

    @abstractmethod
    def update(self, movie: Movie) -> "Movie":
        pass

    @abstractmethod
    def delete_by_id(self, movie_id: int) -> bool:
        pass
