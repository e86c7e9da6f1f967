from abc import ABC, abstractmethod
from typing import List, Optional

from dsmovie.domain.models import Score, ScoreKey, Movie


class ScoreRepository(ABC):
    @abstractmethod
    def get_by_key(self, key: ScoreKey) -> Optional["Score"]:
        pass

    @abstractmethod
    def get_movie_scores(self, movie_id: int) -> List["Score"]:
        pass

    @abstractmethod
    def save_with_movie_aggregate(self, score: Score, movie: Movie) -> "Score":
        """Upsert the score, then store the movie's score and count, in one transaction."""
        pass
