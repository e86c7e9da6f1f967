from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from dsmovie.auth.dependencies import require_roles
from dsmovie.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ROLE_ADMIN
from dsmovie.domain.dto import MovieCreate, MovieDTO, Page, PageRequest
from dsmovie.service.dependencies import get_movie_service
from dsmovie.service.movie_service import MovieService


router = APIRouter(
    prefix="/movies",
    tags=["Movies"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=Page[MovieDTO])
def find_all(
    title: str = Query("", description="Case-insensitive part of the title"),
    page: int = Query(0, ge=0, description="Page number (0-based index)"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"),
    sort: Optional[str] = Query(None, description="Sort as 'field' or 'field,asc|desc'"),
    movie_service: MovieService = Depends(get_movie_service)
):
    # an invalid sort surfaces as ValidationException -> 422
    return movie_service.find_all(title, {"page": page, "size": size, "sort": sort})


@router.get("/{movie_id}", response_model=MovieDTO)
def find_by_id(
    movie_id: int,
    movie_service: MovieService = Depends(get_movie_service)
):
    return movie_service.find_by_id(movie_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MovieDTO,
    dependencies=[Depends(require_roles(ROLE_ADMIN))]
)
def insert(
    data: MovieCreate,
    movie_service: MovieService = Depends(get_movie_service)
):
    return movie_service.insert(data)


@router.put(
    "/{movie_id}",
    response_model=MovieDTO,
    dependencies=[Depends(require_roles(ROLE_ADMIN))]
)
def update(
    movie_id: int,
    data: MovieCreate,
    movie_service: MovieService = Depends(get_movie_service)
):
    return movie_service.update(movie_id, data)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(ROLE_ADMIN))]
)
def delete(
    movie_id: int,
    movie_service: MovieService = Depends(get_movie_service)
):
    movie_service.delete(movie_id)
