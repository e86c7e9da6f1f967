from dsmovie.config.paths import *

VERSION = "0.1.0"
API_TITLE = "DSMovie API"
API_DESCRIPTION = "API for the movie catalog and user scores"

# paging
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
SORTABLE_MOVIE_FIELDS = ("id", "title", "score", "count")

# user score bounds (inclusive)
SCORE_MIN = 0.0
SCORE_MAX = 5.0

# movie title length bounds
TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 80

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_CLIENT = "ROLE_CLIENT"


def validate_config():
    if SCORE_MIN >= SCORE_MAX:
        raise ValueError("SCORE_MIN must be less than SCORE_MAX")
    if not 0 < DEFAULT_PAGE_SIZE <= MAX_PAGE_SIZE:
        raise ValueError("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")
    if TITLE_MIN_LENGTH > TITLE_MAX_LENGTH:
        raise ValueError("TITLE_MIN_LENGTH must not exceed TITLE_MAX_LENGTH")


validate_config()
