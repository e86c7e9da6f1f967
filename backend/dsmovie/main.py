from datetime import datetime, timezone
import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dsmovie.config import API_TITLE, API_DESCRIPTION, VERSION
from dsmovie.config.logging import setup_logging
from dsmovie.controllers.auth_controller import router as auth_router
from dsmovie.controllers.movie_controller import router as movie_router
from dsmovie.controllers.score_controller import router as score_router
from dsmovie.db.database import engine, Base
from dsmovie.domain.dto import ErrorResponse, FieldMessage
from dsmovie.exceptions.auth import UnauthenticatedException, InvalidCredentialsException
from dsmovie.exceptions.repository import RepositoryException
from dsmovie.exceptions.service import (
    ResourceNotFoundException,
    ReferentialIntegrityException,
    ValidationException
)
from dsmovie.service.validation import field_messages

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=VERSION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include controllers
app.include_router(auth_router)
app.include_router(movie_router)
app.include_router(score_router)


def init_db():
    import dsmovie.db.models  # noqa: F401 registers the tables on Base.metadata
    Base.metadata.create_all(bind=engine)


@app.on_event("startup")
def startup_event():
    init_db()
    logger.info("Database initialized")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    errors: Optional[List[FieldMessage]] = None,
    headers: Optional[dict] = None
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=error,
        path=request.url.path,
        errors=errors
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True),
        headers=headers
    )


@app.exception_handler(ResourceNotFoundException)
async def resource_not_found_handler(request: Request, exc: ResourceNotFoundException):
    return _error_response(request, status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ReferentialIntegrityException)
async def referential_integrity_handler(request: Request, exc: ReferentialIntegrityException):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(ValidationException)
async def validation_handler(request: Request, exc: ValidationException):
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), errors=exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = field_messages(exc.errors(), skip_loc=("body",))
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid data", errors=errors)


@app.exception_handler(UnauthenticatedException)
@app.exception_handler(InvalidCredentialsException)
async def unauthenticated_handler(request: Request, exc: Exception):
    return _error_response(
        request,
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"}
    )


@app.exception_handler(RepositoryException)
async def repository_error_handler(request: Request, exc: RepositoryException):
    logger.error(f"Repository failure on {request.method} {request.url.path}: {str(exc)}")
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.get("/")
async def root():
    return {"message": "DSMovie API"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
