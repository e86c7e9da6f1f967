import pytest
from unittest.mock import Mock

from dsmovie.domain.dto import MovieCreate, PageRequest
from dsmovie.domain.models import Movie, Score
from dsmovie.service.movie_service import MovieService
from dsmovie.exceptions.repository import IntegrityViolationException
from dsmovie.exceptions.service import (
    ResourceNotFoundException,
    ReferentialIntegrityException,
    ValidationException
)

IMAGE = "https://www.themoviedb.org/t/p/w533_and_h300_bestv2/jBJWaqoSCiARWtfV0GlqHrcdidd.jpg"

EXISTING_ID = 1
NON_EXISTING_ID = 2
DEPENDENT_ID = 3


@pytest.fixture
def mock_movie_repo():
    """Create a mock movie repository."""
    return Mock()


@pytest.fixture
def movie_service(mock_movie_repo):
    """Create a movie service with mock repository."""
    return MovieService(mock_movie_repo)


@pytest.fixture
def movie():
    return Movie(id=EXISTING_ID, title="Test Movie", score=0.0, count=0, image=IMAGE)


@pytest.fixture
def movie_data():
    return MovieCreate(title="Test Movie", image=IMAGE)


def test_find_all_returns_page(movie_service, mock_movie_repo, movie):
    """Test a matching title returns a page with the movie."""
    mock_movie_repo.search_by_title.return_value = ([movie], 1)
    page_request = PageRequest(page=0, size=10)

    result = movie_service.find_all("Test Movie", page_request)

    assert len(result.content) == 1
    assert result.content[0].title == "Test Movie"
    assert result.total_elements == 1
    assert result.total_pages == 1
    mock_movie_repo.search_by_title.assert_called_once_with("Test Movie", page_request)


def test_find_all_no_match_returns_empty_page(movie_service, mock_movie_repo):
    """Test a title without matches is an empty page, not an error."""
    mock_movie_repo.search_by_title.return_value = ([], 0)

    result = movie_service.find_all("nonexistent", PageRequest(page=0, size=10))

    assert result.content == []
    assert result.total_elements == 0
    assert result.total_pages == 0


def test_find_all_defaults(movie_service, mock_movie_repo):
    """Test missing title and page request fall back to defaults."""
    mock_movie_repo.search_by_title.return_value = ([], 0)

    result = movie_service.find_all(None)

    title, page_request = mock_movie_repo.search_by_title.call_args.args
    assert title == ""
    assert page_request.page == 0
    assert page_request.size == 10
    assert result.size == 10


def test_find_all_invalid_sort(movie_service, mock_movie_repo):
    with pytest.raises(ValidationException) as exc_info:
        movie_service.find_all("", {"sort": "password,asc"})

    assert exc_info.value.errors[0].field_name == "sort"
    mock_movie_repo.search_by_title.assert_not_called()


def test_find_by_id_existing(movie_service, mock_movie_repo, movie):
    mock_movie_repo.get_by_id.return_value = movie

    result = movie_service.find_by_id(EXISTING_ID)

    assert result.id == EXISTING_ID
    assert result.title == movie.title


def test_find_by_id_not_found(movie_service, mock_movie_repo):
    mock_movie_repo.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundException):
        movie_service.find_by_id(NON_EXISTING_ID)


def test_insert_starts_without_scores(movie_service, mock_movie_repo, movie_data):
    """Test a new movie is stored with score 0.0 and count 0."""
    mock_movie_repo.create.side_effect = lambda m: Movie(
        id=10, title=m.title, score=m.score, count=m.count, image=m.image
    )

    result = movie_service.insert(movie_data)

    created = mock_movie_repo.create.call_args.args[0]
    assert created.id is None
    assert created.score == 0.0
    assert created.count == 0
    assert result.id == 10
    assert result.title == "Test Movie"


@pytest.mark.parametrize("data, field_name", [
    ({"title": "", "image": IMAGE}, "title"),
    ({"title": "Abc", "image": IMAGE}, "title"),
    ({"title": "x" * 81, "image": IMAGE}, "title"),
    ({"title": "Test Movie", "image": "not a url"}, "image"),
    ({"image": IMAGE}, "title"),
])
def test_insert_invalid_data(movie_service, mock_movie_repo, data, field_name):
    """Test invalid input is rejected before the repository is called."""
    with pytest.raises(ValidationException) as exc_info:
        movie_service.insert(data)

    assert field_name in [e.field_name for e in exc_info.value.errors]
    mock_movie_repo.create.assert_not_called()


def test_update_existing(movie_service, mock_movie_repo, movie):
    mock_movie_repo.get_by_id.return_value = movie
    mock_movie_repo.update.side_effect = lambda m: m

    result = movie_service.update(EXISTING_ID, MovieCreate(title="Another Movie", image=IMAGE))

    assert result.id == EXISTING_ID
    assert result.title == "Another Movie"


def test_update_keeps_score_and_count(movie_service, mock_movie_repo):
    """Test editing title and image never resets the aggregate."""
    scored = Movie(
        id=EXISTING_ID,
        title="Test Movie",
        score=4.5,
        count=2,
        image=IMAGE,
        scores=[Score(EXISTING_ID, 1, 4.0), Score(EXISTING_ID, 2, 5.0)]
    )
    mock_movie_repo.get_by_id.return_value = scored
    mock_movie_repo.update.side_effect = lambda m: m

    result = movie_service.update(EXISTING_ID, {"title": "Renamed Movie", "image": IMAGE})

    updated = mock_movie_repo.update.call_args.args[0]
    assert updated.score == 4.5
    assert updated.count == 2
    assert result.score == 4.5
    assert result.count == 2


def test_update_not_found(movie_service, mock_movie_repo, movie_data):
    mock_movie_repo.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundException):
        movie_service.update(NON_EXISTING_ID, movie_data)

    mock_movie_repo.update.assert_not_called()


def test_delete_existing(movie_service, mock_movie_repo):
    mock_movie_repo.exists_by_id.return_value = True
    mock_movie_repo.delete_by_id.return_value = True

    movie_service.delete(EXISTING_ID)

    mock_movie_repo.delete_by_id.assert_called_once_with(EXISTING_ID)


def test_delete_not_found(movie_service, mock_movie_repo):
    mock_movie_repo.exists_by_id.return_value = False

    with pytest.raises(ResourceNotFoundException):
        movie_service.delete(NON_EXISTING_ID)

    mock_movie_repo.delete_by_id.assert_not_called()


def test_delete_dependent_movie(movie_service, mock_movie_repo):
    """Test a movie with scores reports a referential integrity failure."""
    mock_movie_repo.exists_by_id.return_value = True
    mock_movie_repo.delete_by_id.side_effect = IntegrityViolationException("still referenced")

    with pytest.raises(ReferentialIntegrityException, match="Referential integrity failure"):
        movie_service.delete(DEPENDENT_ID)


def test_delete_lost_race_reports_not_found(movie_service, mock_movie_repo):
    """Test a movie removed between the existence check and the delete."""
    mock_movie_repo.exists_by_id.return_value = True
    mock_movie_repo.delete_by_id.return_value = False

    with pytest.raises(ResourceNotFoundException):
        movie_service.delete(EXISTING_ID)
