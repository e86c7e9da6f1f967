from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Generic, TypeVar
import math
import re

from dsmovie.config import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SORTABLE_MOVIE_FIELDS,
    SCORE_MIN,
    SCORE_MAX,
    TITLE_MIN_LENGTH,
    TITLE_MAX_LENGTH,
)

T = TypeVar("T")

URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    username: Optional[str] = None
    authorities: List[str] = []

class UserProfile(BaseModel):
    id: int
    name: Optional[str] = None
    username: str
    authorities: List[str]


class MovieCreate(BaseModel):
    title: str
    image: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Required field')
        if not TITLE_MIN_LENGTH <= len(v) <= TITLE_MAX_LENGTH:
            raise ValueError(f'Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters')
        return v

    @field_validator('image')
    @classmethod
    def validate_image(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not URL_PATTERN.match(v):
            raise ValueError('Image must be a valid URL')
        return v


class MovieDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    score: float
    count: int
    image: Optional[str] = None


class ScoreCreate(BaseModel):
    movie_id: int
    score: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)


class PageRequest(BaseModel):
    page: int = Field(0, ge=0, description="Page number (0-based index)")
    size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page")
    sort: Optional[str] = Field(None, description="Sort as 'field' or 'field,asc|desc'")

    @field_validator('sort')
    @classmethod
    def validate_sort(cls, v):
        if v is None or not v.strip():
            return None
        field, _, direction = v.strip().partition(',')
        field = field.strip()
        direction = direction.strip().lower() or 'asc'
        if field not in SORTABLE_MOVIE_FIELDS:
            raise ValueError(f"Cannot sort by '{field}'")
        if direction not in ('asc', 'desc'):
            raise ValueError("Sort direction must be 'asc' or 'desc'")
        return f"{field},{direction}"

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def sort_field(self) -> Optional[str]:
        return self.sort.split(',')[0] if self.sort else None

    @property
    def sort_descending(self) -> bool:
        return bool(self.sort) and self.sort.endswith(',desc')


class Page(BaseModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def of(cls, content: List[T], page_request: PageRequest, total_elements: int) -> "Page[T]":
        return cls(
            content=content,
            page=page_request.page,
            size=page_request.size,
            total_elements=total_elements,
            total_pages=math.ceil(total_elements / page_request.size) if total_elements else 0
        )


class FieldMessage(BaseModel):
    field_name: str
    message: str

class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    path: str
    errors: Optional[List[FieldMessage]] = None
